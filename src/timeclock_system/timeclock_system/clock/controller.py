from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import Identity, admin_required, json_body, login_required
from ..common.validators import optional_int
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import SessionStatus
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    clock = container.clock_service

    @app.route("/api/timesheets/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    def clock_in(identity: Identity):
        data = json_body()
        session = clock.clock_in(
            identity.user_id,
            issue_id=optional_int(data.get("issue_id"), "issue_id"),
            project_name=data.get("project_name"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            location_address=data.get("location_address"),
        )
        return jsonify(session.to_dict()), 201

    @app.route("/api/timesheets/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    def clock_out(identity: Identity):
        data = json_body()
        result = clock.clock_out(identity.user_id, comment=data.get("comment"))
        return jsonify(result.to_dict())

    @app.route("/api/timesheets/pause", methods=["POST"], endpoint="pause")
    @login_required
    def pause(identity: Identity):
        data = json_body()
        session = clock.pause(identity.user_id, data.get("reason") or "")
        return jsonify(session.to_dict())

    @app.route("/api/timesheets/resume", methods=["POST"], endpoint="resume")
    @login_required
    def resume(identity: Identity):
        session = clock.resume(identity.user_id)
        return jsonify(session.to_dict())

    @app.route("/api/timesheets/current", methods=["GET"], endpoint="current_session")
    @login_required
    def current_session(identity: Identity):
        current = clock.get_current_session(identity.user_id)
        return jsonify({"session": current.to_dict() if current else None})

    @app.route("/api/timesheets/entries", methods=["GET"], endpoint="session_history")
    @login_required
    def session_history(identity: Identity):
        args = request.args
        status = None
        if args.get("status"):
            try:
                status = SessionStatus(args["status"])
            except ValueError:
                raise ValidationError(f"Unknown status {args['status']!r}")

        rows = clock.list_sessions(
            identity.user_id,
            is_admin=identity.is_admin,
            start_date=parse_iso_date(args["start_date"]) if args.get("start_date") else None,
            end_date=parse_iso_date(args["end_date"]) if args.get("end_date") else None,
            status=status,
            limit=optional_int(args.get("limit"), "limit") or DEFAULT_HISTORY_LIMIT,
        )
        return jsonify({"entries": [r.to_dict() for r in rows]})

    @app.route("/api/timesheets/active", methods=["GET"], endpoint="active_sessions")
    @admin_required
    def active_sessions(identity: Identity):
        rows = clock.list_active_sessions()
        return jsonify({"sessions": [r.to_dict() for r in rows]})
