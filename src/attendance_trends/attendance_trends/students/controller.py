from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.validators import require_int_in_range
from ..core.constants import MAX_TERM, MAX_YEAR, MIN_TERM, MIN_YEAR
from ..core.enums import Role
from ..container import Container
from ..users.decorators import make_role_required


def register(app: Flask, container: Container) -> None:
    role_required = make_role_required(container)

    @app.route("/api/me/summary", endpoint="me_summary")
    @role_required(Role.STUDENT)
    def me_summary():
        return jsonify(container.student_service.summary(g.caller))

    @app.route("/api/me/term", endpoint="me_term")
    @role_required(Role.STUDENT)
    def me_term():
        year = require_int_in_range(request.args.get("year"), "year", MIN_YEAR, MAX_YEAR)
        term = require_int_in_range(request.args.get("term"), "term", MIN_TERM, MAX_TERM)
        return jsonify(container.student_service.term_detail(g.caller, year=year, term=term))
