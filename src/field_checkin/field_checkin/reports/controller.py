from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, handle_domain_errors, manager_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/daily-summary", methods=["GET"], endpoint="daily_summary")
    @manager_required
    @handle_domain_errors("generate daily summary")
    def daily_summary():
        summary = container.daily_summary_service.build_daily_summary(
            current_user_id(),
            report_date=request.args.get("date"),
        )
        return ok(summary.to_dict())
