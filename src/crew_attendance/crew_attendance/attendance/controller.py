from __future__ import annotations

from flask import Flask

from ..common.responses import error_response, json_body, ok
from ..core.enums import parse_hall, parse_role
from ..core.exceptions import DomainError, ValidationError
from .model import entry_view


def _names(payload: dict, key: str) -> list[str]:
    value = payload.get(key) or []
    if not isinstance(value, (list, tuple)) or not all(isinstance(n, str) for n in value):
        raise ValidationError(f"{key} must be a list of names")
    return list(value)


def _text(payload: dict, key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be text")
    return value


def register(app: Flask, container) -> None:
    attendance = container.attendance_service
    members = container.member_service

    @app.route("/api/kiosk/status", methods=["GET"], endpoint="kiosk_status")
    def kiosk_status():
        try:
            board = attendance.status_board()
        except DomainError as e:
            return error_response(e)
        return ok(
            slots=[
                {
                    "hall": s.hall.value,
                    "role": s.role.value,
                    "label": f"{s.hall.label}／{s.role.label}",
                    "entry": entry_view(s.entry) if s.entry else None,
                    "problem_ids": list(s.problem_ids),
                }
                for s in board
            ]
        )

    @app.route("/api/kiosk/<hall>/<role>", methods=["GET"], endpoint="kiosk_slot")
    def kiosk_slot(hall: str, role: str):
        try:
            h, r = parse_hall(hall), parse_role(role)
            entry = attendance.snapshot(h, r)
            roster = members.list_for_kiosk(r)
        except DomainError as e:
            return error_response(e)
        return ok(
            open_entry=entry_view(entry) if entry else None,
            roster=[{"id": m.member_id, "name": m.name} for m in roster],
        )

    @app.route("/api/kiosk/<hall>/<role>/checkin", methods=["POST"], endpoint="kiosk_checkin")
    def kiosk_checkin(hall: str, role: str):
        try:
            payload = json_body()
            entry = attendance.check_in(
                parse_hall(hall),
                parse_role(role),
                selected=_names(payload, "selected"),
                free_names=_names(payload, "free_names"),
            )
        except DomainError as e:
            return error_response(e)
        return ok(message="checked in.", entry=entry_view(entry))

    @app.route("/api/kiosk/<hall>/<role>/checkout", methods=["POST"], endpoint="kiosk_checkout")
    def kiosk_checkout(hall: str, role: str):
        try:
            entry = attendance.check_out(parse_hall(hall), parse_role(role))
        except DomainError as e:
            return error_response(e)
        return ok(message="checked out.", entry=entry_view(entry))

    @app.route("/api/kiosk/<hall>/<role>/members/toggle", methods=["POST"], endpoint="kiosk_toggle_member")
    def kiosk_toggle_member(hall: str, role: str):
        try:
            name = _text(json_body(), "name")
            if not name.strip():
                raise ValidationError("name is required")
            entry = attendance.toggle_member(parse_hall(hall), parse_role(role), name)
        except DomainError as e:
            return error_response(e)
        return ok(entry=entry_view(entry))

    @app.route("/api/kiosk/<hall>/<role>/members", methods=["PUT"], endpoint="kiosk_replace_members")
    def kiosk_replace_members(hall: str, role: str):
        try:
            entry = attendance.correct_member_list(
                parse_hall(hall), parse_role(role), _names(json_body(), "member_names")
            )
        except DomainError as e:
            return error_response(e)
        return ok(entry=entry_view(entry))

    @app.route("/api/kiosk/<hall>/<role>/checkin-time", methods=["POST"], endpoint="kiosk_correct_checkin")
    def kiosk_correct_checkin(hall: str, role: str):
        try:
            payload = json_body()
            entry = attendance.correct_check_in_time(
                parse_hall(hall),
                parse_role(role),
                _text(payload, "time"),
                str(payload.get("pin") or ""),
            )
        except DomainError as e:
            return error_response(e)
        return ok(message="check-in time corrected.", entry=entry_view(entry))
