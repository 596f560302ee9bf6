from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.http import current_staff_id, ok, parse_body, require_admin_access, require_auth
from ..container import Container
from .export import EXCEL_MIMETYPE, attendance_workbook, export_filename
from .schemas import AttendanceUpdate, EventCreate, EventUpdate


def register(app: Flask, container: Container) -> None:
    service = container.event_service

    @app.route("/api/events", methods=["GET"], endpoint="events_list")
    @require_auth
    def list_events():
        active_only = (request.args.get("active") or "").lower() == "true"
        return ok(service.list_events(active_only=active_only))

    @app.route("/api/events/<event_id>", methods=["GET"], endpoint="events_get")
    @require_auth
    def get_event(event_id: str):
        return ok(service.get(event_id))

    @app.route("/api/events", methods=["POST"], endpoint="events_create")
    @require_admin_access
    def create_event():
        body = parse_body(EventCreate)
        return ok(service.create(created_by=current_staff_id(), fields=body.model_dump()), 201)

    @app.route("/api/events/<event_id>", methods=["PUT"], endpoint="events_update")
    @require_admin_access
    def update_event(event_id: str):
        body = parse_body(EventUpdate)
        return ok(service.update(event_id, body.changes()))

    @app.route("/api/events/<event_id>", methods=["DELETE"], endpoint="events_delete")
    @require_admin_access
    def delete_event(event_id: str):
        service.delete(event_id)
        return jsonify({"message": "Event deleted"})

    @app.route("/api/events/<event_id>/attendance", methods=["GET"], endpoint="events_attendance")
    @require_auth
    def event_attendance(event_id: str):
        return ok(service.attendance(event_id))

    @app.route(
        "/api/events/<event_id>/attendance/initialize", methods=["POST"], endpoint="events_attendance_init"
    )
    @require_admin_access
    def initialize_attendance(event_id: str):
        added = service.initialize_missing(event_id, updated_by=current_staff_id())
        return jsonify({"message": "Attendance initialized", "added": added})

    @app.route("/api/events/<event_id>/stats", methods=["GET"], endpoint="events_stats")
    @require_auth
    def event_stats(event_id: str):
        return ok(service.stats(event_id))

    @app.route("/api/events/<event_id>/attendance.xlsx", methods=["GET"], endpoint="events_export")
    @require_admin_access
    def export_attendance(event_id: str):
        event = service.get(event_id)
        output = attendance_workbook(service.attendance(event_id))
        return send_file(
            output, download_name=export_filename(event), as_attachment=True, mimetype=EXCEL_MIMETYPE
        )

    @app.route("/api/attendance/<attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @require_auth
    def update_attendance(attendance_id: str):
        body = parse_body(AttendanceUpdate)
        return ok(service.set_status(attendance_id, body.attendance_status, updated_by=current_staff_id()))
