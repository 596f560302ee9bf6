from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import ok, parse_body, require_admin_access, require_auth
from ..common.serialization import to_json
from ..container import Container
from .model import DepartmentBranch
from .schemas import DepartmentCreate, DepartmentUpdate, TeamCreate, TeamUpdate


def _branch_json(branch: DepartmentBranch) -> dict:
    out = to_json(branch.department)
    out["teams"] = [
        dict(to_json(t.team), families=to_json(list(t.families))) for t in branch.teams
    ]
    return out


def register(app: Flask, container: Container) -> None:
    org = container.organization_service

    @app.route("/api/departments", methods=["GET"], endpoint="departments_list")
    @require_auth
    def list_departments():
        return ok(org.list_departments())

    @app.route("/api/departments/tree", methods=["GET"], endpoint="departments_tree")
    @require_auth
    def department_tree():
        return jsonify([_branch_json(b) for b in org.tree()])

    @app.route("/api/departments/<department_id>", methods=["GET"], endpoint="departments_get")
    @require_auth
    def get_department(department_id: str):
        return ok(org.get_department(department_id))

    @app.route("/api/departments", methods=["POST"], endpoint="departments_create")
    @require_admin_access
    def create_department():
        body = parse_body(DepartmentCreate)
        return ok(org.create_department(body.model_dump()), 201)

    @app.route("/api/departments/<department_id>", methods=["PUT"], endpoint="departments_update")
    @require_admin_access
    def update_department(department_id: str):
        body = parse_body(DepartmentUpdate)
        return ok(org.update_department(department_id, body.changes()))

    @app.route("/api/departments/<department_id>", methods=["DELETE"], endpoint="departments_delete")
    @require_admin_access
    def delete_department(department_id: str):
        org.delete_department(department_id)
        return jsonify({"message": "Department deleted"})

    @app.route("/api/teams", methods=["GET"], endpoint="teams_list")
    @require_auth
    def list_teams():
        return ok(org.list_teams(request.args.get("departmentId") or None))

    @app.route("/api/teams/<team_id>", methods=["GET"], endpoint="teams_get")
    @require_auth
    def get_team(team_id: str):
        return ok(org.get_team(team_id))

    @app.route("/api/teams", methods=["POST"], endpoint="teams_create")
    @require_admin_access
    def create_team():
        body = parse_body(TeamCreate)
        return ok(org.create_team(body.fields(), body.assigned_staff), 201)

    @app.route("/api/teams/<team_id>", methods=["PUT"], endpoint="teams_update")
    @require_admin_access
    def update_team(team_id: str):
        body = parse_body(TeamUpdate)
        return ok(org.update_team(team_id, body.field_changes(), body.assigned_staff))

    @app.route("/api/teams/<team_id>", methods=["DELETE"], endpoint="teams_delete")
    @require_admin_access
    def delete_team(team_id: str):
        org.delete_team(team_id)
        return jsonify({"message": "Team deleted"})
