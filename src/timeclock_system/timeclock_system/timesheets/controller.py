from __future__ import annotations

from typing import Any

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import Identity, json_body, login_required
from ..common.validators import optional_int
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    timesheets = container.timesheet_service

    def target_user(identity: Identity, requested: Any) -> int:
        """Whose week is addressed; only admins may name another user."""
        user_id = optional_int(requested, "user_id")
        if user_id is None or user_id == identity.user_id:
            return identity.user_id
        if not identity.is_admin:
            raise AuthorizationError("Only admins can access another user's timesheet")
        return user_id

    @app.route("/api/timesheets/week", methods=["GET"], endpoint="week_navigation")
    @login_required
    def week_navigation(identity: Identity):
        value = request.args.get("date")
        return jsonify(timesheets.week_navigation(parse_iso_date(value) if value else None))

    @app.route("/api/timesheets", methods=["GET"], endpoint="get_week")
    @login_required
    def get_week(identity: Identity):
        value = request.args.get("week_start")
        week_start = parse_iso_date(value) if value else now_local().date()
        user_id = target_user(identity, request.args.get("user_id"))
        return jsonify(timesheets.get_week(user_id, week_start).to_dict())

    @app.route("/api/timesheets", methods=["POST"], endpoint="save_week")
    @login_required
    def save_week(identity: Identity):
        data = json_body()
        if not data.get("week_start"):
            raise ValidationError("week_start is required")
        week_start = parse_iso_date(str(data["week_start"]))
        user_id = target_user(identity, data.get("user_id"))
        result = timesheets.save_manual_entries(user_id, week_start, data.get("entries"))
        return jsonify({"timesheet_id": result.timesheet_id, "entries_saved": result.entries_saved})

    @app.route("/api/timesheets/<int:timesheet_id>", methods=["GET"], endpoint="get_timesheet")
    @login_required
    def get_timesheet(identity: Identity, timesheet_id: int):
        sheet = timesheets.get_timesheet(timesheet_id)
        target_user(identity, sheet.timesheet.user_id)
        return jsonify(sheet.to_dict())
