from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_user_id, handle_domain_errors, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _date_arg(name: str):
        value = request.args.get(name)
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"Invalid {name}. Use YYYY-MM-DD") from None

    @app.route("/api/checkin/clients", methods=["GET"], endpoint="assigned_clients")
    @login_required
    @handle_domain_errors("fetch assigned clients")
    def assigned_clients():
        clients = container.checkin_service.list_assigned_clients(current_user_id())
        return ok([c.to_dict() for c in clients])

    @app.route("/api/checkin", methods=["POST"], endpoint="create_checkin")
    @login_required
    @handle_domain_errors("check in")
    def create_checkin():
        data = json_body()
        result = container.checkin_service.create_check_in(
            current_user_id(),
            client_id=data.get("client_id"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            note=data.get("notes"),
        )
        return ok(result.to_dict(), 201, message="Checked in successfully")

    @app.route("/api/checkin/checkout", methods=["PUT"], endpoint="checkout")
    @login_required
    @handle_domain_errors("check out")
    def checkout():
        result = container.checkin_service.check_out(current_user_id())
        return ok(result.to_dict(), message="Checked out successfully")

    @app.route("/api/checkin/active", methods=["GET"], endpoint="active_checkin")
    @login_required
    @handle_domain_errors("fetch active check-in")
    def active_checkin():
        view = container.checkin_service.get_active(current_user_id())
        return ok(view.to_dict() if view else None)

    @app.route("/api/checkin/history", methods=["GET"], endpoint="checkin_history")
    @login_required
    @handle_domain_errors("fetch check-in history")
    def checkin_history():
        views = container.checkin_service.get_history(
            current_user_id(),
            start_date=_date_arg("start_date"),
            end_date=_date_arg("end_date"),
        )
        return ok([v.to_dict() for v in views])
