from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_staff_id, ok, parse_body, require_admin_access, require_auth
from ..container import Container
from .schemas import AnnouncementCreate, AnnouncementUpdate


def register(app: Flask, container: Container) -> None:
    service = container.announcement_service

    @app.route("/api/announcements", methods=["GET"], endpoint="announcements_list")
    @require_admin_access
    def list_announcements():
        return ok(service.list_all())

    @app.route("/api/announcements/active", methods=["GET"], endpoint="announcements_active")
    @require_auth
    def active_announcements():
        return ok(service.active())

    @app.route("/api/announcements/login", methods=["GET"], endpoint="announcements_login")
    def login_announcements():
        return ok(service.for_login_page())

    @app.route("/api/announcements/dashboard", methods=["GET"], endpoint="announcements_dashboard")
    @require_auth
    def dashboard_announcements():
        return ok(service.for_dashboard())

    @app.route("/api/announcements/public/<announcement_id>", methods=["GET"], endpoint="announcements_public")
    def public_announcement(announcement_id: str):
        return ok(service.get_public(announcement_id))

    @app.route("/api/announcements/<announcement_id>", methods=["GET"], endpoint="announcements_get")
    @require_admin_access
    def get_announcement(announcement_id: str):
        return ok(service.get(announcement_id))

    @app.route("/api/announcements", methods=["POST"], endpoint="announcements_create")
    @require_admin_access
    def create_announcement():
        body = parse_body(AnnouncementCreate)
        return ok(service.create(created_by=current_staff_id(), fields=body.model_dump()), 201)

    @app.route("/api/announcements/<announcement_id>", methods=["PUT"], endpoint="announcements_update")
    @require_admin_access
    def update_announcement(announcement_id: str):
        body = parse_body(AnnouncementUpdate)
        return ok(service.update(announcement_id, body.changes()))

    @app.route("/api/announcements/<announcement_id>", methods=["DELETE"], endpoint="announcements_delete")
    @require_admin_access
    def delete_announcement(announcement_id: str):
        service.delete(announcement_id)
        return jsonify({"message": "Announcement deleted"})
