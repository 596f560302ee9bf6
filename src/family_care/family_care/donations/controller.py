from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date
from ..common.http import current_staff_id, ok, parse_body, require_admin_access
from ..common.validators import parse_bool_flag
from ..container import Container
from ..core.enums import DonationType
from ..core.exceptions import ValidationError
from .model import DonationFilters
from .schemas import DonationCreate, DonationUpdate


def filters_from_args(args) -> DonationFilters:
    raw_type = (args.get("type") or "").strip()
    donation_type = None
    if raw_type and raw_type.lower() != "all":
        try:
            donation_type = DonationType(raw_type)
        except ValueError:
            raise ValidationError(f"Invalid donation type: {raw_type!r}")

    return DonationFilters(
        family_name=(args.get("familyName") or "").strip() or None,
        type=donation_type,
        date_from=parse_optional_date(args.get("dateFrom")),
        date_to=parse_optional_date(args.get("dateTo")),
        received=parse_bool_flag(args.get("received")),
        email_for_thank=parse_bool_flag(args.get("emailForThank")),
        email_for_tax=parse_bool_flag(args.get("emailForTax")),
    )


def register(app: Flask, container: Container) -> None:
    service = container.donation_service

    @app.route("/api/donations", methods=["GET"], endpoint="donations_list")
    @require_admin_access
    def list_donations():
        return ok(service.search(filters_from_args(request.args)))

    @app.route("/api/donations/<donation_id>", methods=["GET"], endpoint="donations_get")
    @require_admin_access
    def get_donation(donation_id: str):
        return ok(service.get(donation_id))

    @app.route("/api/donations", methods=["POST"], endpoint="donations_create")
    @require_admin_access
    def create_donation():
        body = parse_body(DonationCreate)
        return ok(service.create(created_by=current_staff_id(), fields=body.model_dump()), 201)

    @app.route("/api/donations/<donation_id>", methods=["PUT"], endpoint="donations_update")
    @require_admin_access
    def update_donation(donation_id: str):
        body = parse_body(DonationUpdate)
        return ok(service.update(donation_id, body.changes()))

    @app.route("/api/donations/<donation_id>", methods=["DELETE"], endpoint="donations_delete")
    @require_admin_access
    def delete_donation(donation_id: str):
        service.delete(donation_id)
        return jsonify({"message": "Donation deleted"})
