from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..users.decorators import make_role_required


def register(app: Flask, container: Container) -> None:
    role_required = make_role_required(container)

    @app.route("/api/uploads", methods=["POST"], endpoint="api_uploads")
    @role_required(Role.ADMIN)
    def api_uploads():
        """Upload one week's attendance CSV (multipart: file, year, term, week)."""
        file = request.files.get("file")
        if file is None or not file.filename:
            raise ValidationError("file is required")

        result = container.ingestion_service.ingest_upload(
            raw=file.read(),
            filename=file.filename,
            year=request.form.get("year"),
            term=request.form.get("term"),
            week=request.form.get("week"),
            uploaded_by=g.caller.uid,
        )
        return jsonify(result.to_dict()), 200
