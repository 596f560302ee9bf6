from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import (
    current_staff_id,
    ok,
    parse_body,
    require_auth,
    require_super_admin_access,
)
from ..container import Container
from ..core.constants import DEFAULT_LOGIN_LOG_LIMIT
from .schemas import LoginRequest, ProfileUpdate, StaffCreate, StaffOrder, StaffUpdate


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = parse_body(LoginRequest)
        member = container.auth_service.authenticate(
            body.nickname,
            body.pin,
            ip_address=request.remote_addr,
            user_agent=request.headers.get("User-Agent"),
        )

        session.clear()
        session.permanent = True
        session["staff_id"] = member.id
        session["staff_group"] = member.group.value
        session["name"] = member.full_name
        return ok(member.summary())

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @require_auth
    def me():
        return ok(container.auth_service.current(current_staff_id()).summary())

    @app.route("/api/auth/profile", methods=["PUT"], endpoint="auth_profile")
    @require_auth
    def update_profile():
        body = parse_body(ProfileUpdate)
        updated = container.staff_service.update_profile(current_staff_id(), body.changes())
        session["name"] = updated.full_name
        return ok(updated.summary())

    @app.route("/api/staff", methods=["GET"], endpoint="staff_list")
    def list_staff():
        return ok([s.summary() for s in container.staff_service.list_active()])

    @app.route("/api/staff/manage", methods=["GET"], endpoint="staff_manage_list")
    @require_super_admin_access
    def list_staff_for_management():
        return ok(container.staff_service.list_for_management())

    @app.route("/api/staff/manage", methods=["POST"], endpoint="staff_manage_create")
    @require_super_admin_access
    def create_staff():
        body = parse_body(StaffCreate)
        return ok(container.staff_service.create(**body.model_dump()), 201)

    @app.route("/api/staff/manage/display-order", methods=["PUT"], endpoint="staff_manage_order")
    @require_super_admin_access
    def reorder_staff():
        body = parse_body(StaffOrder)
        container.staff_service.reorder(body.staff_ids)
        return jsonify({"message": "Display order updated"})

    @app.route("/api/staff/manage/<staff_id>", methods=["PUT"], endpoint="staff_manage_update")
    @require_super_admin_access
    def update_staff(staff_id: str):
        body = parse_body(StaffUpdate)
        return ok(container.staff_service.update(staff_id, body.changes(), current_staff_id=current_staff_id()))

    @app.route("/api/staff/manage/<staff_id>", methods=["DELETE"], endpoint="staff_manage_delete")
    @require_super_admin_access
    def delete_staff(staff_id: str):
        container.staff_service.deactivate(staff_id, current_staff_id=current_staff_id())
        return jsonify({"message": "Staff deactivated"})

    @app.route("/api/staff/<staff_id>/login-logs", methods=["GET"], endpoint="staff_login_logs")
    @require_super_admin_access
    def login_logs(staff_id: str):
        limit = request.args.get("limit", type=int) or DEFAULT_LOGIN_LOG_LIMIT
        return ok(container.staff_service.login_logs(staff_id, limit))
