from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, handle_domain_errors, manager_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    @manager_required
    @handle_domain_errors("fetch dashboard stats")
    def dashboard_stats():
        stats = container.dashboard_service.get_stats(current_user_id())
        return ok(stats.to_dict())

    @app.route("/api/dashboard/employee", methods=["GET"], endpoint="dashboard_employee")
    @manager_required
    @handle_domain_errors("fetch employee details")
    def dashboard_employee():
        details = container.dashboard_service.get_employee_details(current_user_id(), request.args.get("id"))
        return ok(details.to_dict())
