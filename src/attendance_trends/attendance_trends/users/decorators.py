from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request

from ..core.enums import Role
from ..container import Container


def make_role_required(container: Container):
    """Build a `role_required(role)` decorator bound to the container's AuthService."""

    def role_required(role: Optional[Role]):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                caller = container.auth_service.authenticate(request.headers.get("Authorization"))
                container.auth_service.authorize(caller, role)
                g.caller = caller
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return role_required
