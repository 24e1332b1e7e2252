from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import Identity, admin_required, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    leave = container.leave_service

    @app.route("/api/leave", methods=["GET"], endpoint="list_leave")
    @login_required
    def list_leave(identity: Identity):
        rows = leave.list_for_user(user_id=identity.user_id)
        return jsonify({"requests": [r.to_dict() for r in rows]})

    @app.route("/api/leave", methods=["POST"], endpoint="create_leave")
    @login_required
    def create_leave(identity: Identity):
        data = json_body()
        request_id = leave.create_leave(
            current_role=identity.role,
            user_id=identity.user_id,
            start_date=parse_iso_date(data.get("start_date") or ""),
            end_date=parse_iso_date(data.get("end_date") or ""),
            leave_type=data.get("leave_type") or "",
            reason=data.get("reason") or "",
        )
        return jsonify({"request_id": request_id}), 201

    @app.route("/api/leave/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @admin_required
    def approve_leave(identity: Identity, request_id: int):
        leave.approve_leave(
            current_role=identity.role,
            admin_user_id=identity.user_id,
            request_id=request_id,
            admin_note=json_body().get("admin_note") or "",
        )
        return jsonify({"request_id": request_id, "status": "APPROVED"})

    @app.route("/api/leave/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @admin_required
    def reject_leave(identity: Identity, request_id: int):
        leave.reject_leave(
            current_role=identity.role,
            admin_user_id=identity.user_id,
            request_id=request_id,
            admin_note=json_body().get("admin_note") or "",
        )
        return jsonify({"request_id": request_id, "status": "REJECTED"})
