from __future__ import annotations

from flask import Flask, jsonify

from ..core.constants import MAX_TERM, MAX_YEAR, MIN_TERM, MIN_YEAR
from ..core.enums import Role
from ..common.validators import require_int_in_range
from ..container import Container
from ..users.decorators import make_role_required


def register(app: Flask, container: Container) -> None:
    role_required = make_role_required(container)
    queries = container.snapshot_query_service

    def _term_args(year, term) -> tuple[int, int]:
        return (
            require_int_in_range(year, "year", MIN_YEAR, MAX_YEAR),
            require_int_in_range(term, "term", MIN_TERM, MAX_TERM),
        )

    @app.route("/api/snapshots/latest/meta", endpoint="latest_meta")
    @role_required(Role.TEACHER)
    def latest_meta():
        return jsonify(queries.latest_meta())

    @app.route("/api/snapshots/latest/classes", endpoint="latest_classes")
    @role_required(Role.TEACHER)
    def latest_classes():
        return jsonify(queries.latest_classes())

    @app.route("/api/snapshots/latest/classes/<path:roll_class>/rows", endpoint="latest_class_rows")
    @role_required(Role.TEACHER)
    def latest_class_rows(roll_class: str):
        return jsonify(queries.latest_class_rows(roll_class))

    @app.route("/api/terms", endpoint="terms")
    @role_required(Role.TEACHER)
    def terms():
        return jsonify(queries.list_terms())

    @app.route("/api/terms/<year>/<term>/classes", endpoint="term_classes")
    @role_required(Role.TEACHER)
    def term_classes(year: str, term: str):
        y, t = _term_args(year, term)
        return jsonify(queries.term_classes(year=y, term=t))

    @app.route("/api/terms/<year>/<term>/classes/<path:roll_class>/rollup", endpoint="class_rollup")
    @role_required(Role.TEACHER)
    def class_rollup(year: str, term: str, roll_class: str):
        y, t = _term_args(year, term)
        return jsonify(queries.class_rollup(year=y, term=t, roll_class=roll_class))
