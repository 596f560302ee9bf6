from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date
from ..common.http import ok, parse_body, require_admin_access, require_auth
from ..container import Container
from .model import FamilyFilters
from .schemas import FamilyCreate, FamilyOrder, FamilyUpdate


def _split(value: Optional[str]) -> tuple[str, ...]:
    return tuple(p.strip() for p in (value or "").split(",") if p.strip())


def filters_from_args(args) -> FamilyFilters:
    statuses = _split(args.get("memberStatus"))
    if "all" in statuses:
        statuses = ()

    return FamilyFilters(
        name=(args.get("name") or "").strip() or None,
        life_group=(args.get("lifeGroup") or "").strip() or None,
        support_team_member=(args.get("supportTeamMember") or "").strip() or None,
        member_statuses=statuses,
        date_from=parse_optional_date(args.get("dateFrom")),
        date_to=parse_optional_date(args.get("dateTo")),
        team_id=(args.get("teamId") or "").strip() or None,
        unassigned=(args.get("unassigned") or "").lower() == "true",
        courses=_split(args.get("courses") or args.get("course")),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/families", methods=["GET"], endpoint="families_list")
    @require_auth
    def list_families():
        return ok(container.family_service.search(filters_from_args(request.args)))

    @app.route("/api/families", methods=["POST"], endpoint="families_create")
    @require_admin_access
    def create_family():
        body = parse_body(FamilyCreate)
        created = container.family_service.create(body.fields(), body.member_dicts())
        return ok(created, 201)

    @app.route("/api/families/display-order", methods=["PUT"], endpoint="families_order")
    @require_admin_access
    def reorder_families():
        body = parse_body(FamilyOrder)
        container.family_service.reorder(body.team_id, body.family_ids)
        return jsonify({"message": "Display order updated"})

    @app.route("/api/families/<family_id>", methods=["GET"], endpoint="families_get")
    @require_auth
    def get_family(family_id: str):
        return ok(container.family_service.get(family_id))

    @app.route("/api/families/<family_id>/members", methods=["GET"], endpoint="families_members")
    @require_auth
    def list_members(family_id: str):
        return ok(container.family_service.members(family_id))

    @app.route("/api/families/<family_id>", methods=["PUT"], endpoint="families_update")
    @require_auth
    def update_family(family_id: str):
        body = parse_body(FamilyUpdate)
        updated = container.family_service.update(family_id, body.field_changes(), body.member_dicts())
        return ok(updated)

    @app.route("/api/families/<family_id>", methods=["DELETE"], endpoint="families_delete")
    @require_admin_access
    def delete_family(family_id: str):
        container.family_service.delete(family_id)
        return jsonify({"message": "Family deleted"})
