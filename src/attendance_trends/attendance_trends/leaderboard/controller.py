from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_int_in_range
from ..core.constants import MAX_TERM, MAX_YEAR, MIN_TERM, MIN_YEAR
from ..core.enums import Role
from ..container import Container
from ..users.decorators import make_role_required


def register(app: Flask, container: Container) -> None:
    role_required = make_role_required(container)

    @app.route("/api/leaderboard", endpoint="leaderboard")
    @role_required(Role.TEACHER)
    def leaderboard():
        year = require_int_in_range(request.args.get("year"), "year", MIN_YEAR, MAX_YEAR)
        term = require_int_in_range(request.args.get("term"), "term", MIN_TERM, MAX_TERM)

        board = container.leaderboard_service.get_term_leaderboard(year=year, term=term)
        return jsonify({"weeks": board.weeks, "leaderboard": [s.to_dict() for s in board.standings]})
