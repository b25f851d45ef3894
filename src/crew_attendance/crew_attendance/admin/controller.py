from __future__ import annotations

from flask import Flask, request

from ..attendance.model import entry_view
from ..common.responses import error_response, json_body, ok
from ..core.enums import parse_hall, parse_role
from ..core.exceptions import DomainError
from .csv_export import export_csv, export_filename

_EDITABLE = ("member_names", "check_in", "check_out", "memo")


def register(app: Flask, container) -> None:
    review = container.review_service

    def _filters():
        month = request.args.get("month") or container.clock().strftime("%Y-%m")
        hall_s = request.args.get("hall")
        role_s = request.args.get("role")
        hall = parse_hall(hall_s) if hall_s else None
        role = parse_role(role_s) if role_s else None
        return month, hall, role

    @app.route("/api/admin/entries", methods=["GET"], endpoint="admin_entries")
    def admin_entries():
        try:
            month, hall, role = _filters()
            data = review.list_month(month, hall=hall, role=role)
        except DomainError as e:
            return error_response(e)
        return ok(month=month, rows=[entry_view(r) for r in data.rows], summary=data.summary)

    @app.route("/api/admin/entries/<int:entry_id>", methods=["PATCH"], endpoint="admin_update_entry")
    def admin_update_entry(entry_id: int):
        try:
            payload = json_body()
            changes = {k: payload[k] for k in _EDITABLE if k in payload}
            entry = review.update_record(entry_id, **changes)
        except DomainError as e:
            return error_response(e)
        return ok(entry=entry_view(entry))

    @app.route("/api/admin/entries.csv", methods=["GET"], endpoint="admin_entries_csv")
    def admin_entries_csv():
        try:
            month, hall, role = _filters()
            data = review.list_month(month, hall=hall, role=role)
        except DomainError as e:
            return error_response(e)

        return app.response_class(
            export_csv(data.rows),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={export_filename(month)}"},
        )
