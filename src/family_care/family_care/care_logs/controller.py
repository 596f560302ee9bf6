from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_group, current_staff_id, ok, parse_body, require_auth
from ..container import Container
from .schemas import CareLogCreate, CareLogUpdate


def register(app: Flask, container: Container) -> None:
    @app.route("/api/families/<family_id>/care-logs", methods=["GET"], endpoint="care_logs_list")
    @require_auth
    def list_care_logs(family_id: str):
        return ok(container.care_log_service.list_for_family(family_id))

    @app.route("/api/care-logs", methods=["POST"], endpoint="care_logs_create")
    @require_auth
    def create_care_log():
        body = parse_body(CareLogCreate)
        created = container.care_log_service.create(
            staff_id=current_staff_id(), family_id=body.family_id, fields=body.fields()
        )
        return ok(created, 201)

    @app.route("/api/care-logs/<care_log_id>", methods=["PUT"], endpoint="care_logs_update")
    @require_auth
    def update_care_log(care_log_id: str):
        body = parse_body(CareLogUpdate)
        updated = container.care_log_service.update(
            care_log_id, body.changes(), staff_id=current_staff_id(), group=current_group()
        )
        return ok(updated)

    @app.route("/api/care-logs/<care_log_id>", methods=["DELETE"], endpoint="care_logs_delete")
    @require_auth
    def delete_care_log(care_log_id: str):
        container.care_log_service.delete(care_log_id, staff_id=current_staff_id(), group=current_group())
        return jsonify({"message": "Care log deleted"})
