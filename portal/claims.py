import logging

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user

from . import db
from .mailer import send_email
from .middleware import admin_required, authenticate_user, can_access, is_admin_session
from .models import CLAIM_STATUSES
from .notifications import notify
from .schemas import CreateClaim, UpdateClaimStatus
from .storage import storage

logger = logging.getLogger(__name__)

claims = Blueprint("claims", __name__)

BANK_FIELDS = ("bank_name", "bank_address", "account_number", "swift_code")


# ==========================================================
# SIDE EFFECTS (best effort, never change the response)
# ==========================================================
def _best_effort(announce, claim):
    claim_id = claim.id
    try:
        announce(claim)
    except Exception:
        db.session.rollback()
        logger.exception("Could not send announcements for claim %s", claim_id)


def _announce_submission(claim):
    admin = storage.get_user_by_username(current_app.config["ADMIN_USERNAME"])
    if admin is not None:
        notify(
            admin.id,
            "New Claim Submitted",
            f"A new claim has been submitted by a student. Claim ID: {claim.id}",
        )
    notify(
        claim.user_id,
        "Claim Submitted",
        f"Your claim for {claim.claim_type} has been submitted and is pending review.",
    )


def _announce_review(claim):
    owner = storage.get_user(claim.user_id)
    if owner is None:
        return
    outcome = claim.status.capitalize()
    notify(
        owner.id,
        f"Claim {outcome}",
        f"Your claim for {claim.claim_type} has been {claim.status}.",
    )

    body = (
        f"Dear {owner.full_name},\n\n"
        f"Your claim for {claim.claim_type} (€{claim.amount:.2f}) has been {claim.status}."
    )
    if claim.review_comment:
        body += f"\n\nReviewer comments: {claim.review_comment}"
    body += "\n\nBest regards,\nScholarship Administration Team"
    send_email(owner.email, f"Scholarship Claim {outcome}", body)


# ==========================================================
# SUBMIT
# ==========================================================
@claims.route("/claims", methods=["POST"])
@authenticate_user
def submit_claim():
    data = CreateClaim.model_validate(request.get_json(silent=True) or {}).model_dump()
    data["user_id"] = current_user.id

    # Bank details default to the ones on the student's profile
    for field in BANK_FIELDS:
        if not data.get(field):
            data[field] = getattr(current_user, field)

    claim = storage.create_claim(data)
    current_app.logger.info(
        "Claim %s submitted by user %s: %s %.2f", claim.id, claim.user_id, claim.claim_type, claim.amount
    )
    body = claim.to_dict()
    _best_effort(_announce_submission, claim)
    return jsonify(body), 201


# ==========================================================
# LIST / DETAIL
# ==========================================================
@claims.route("/claims", methods=["GET"])
@authenticate_user
def list_claims():
    status = (request.args.get("status") or "").strip().lower() or None
    if status is not None and status not in CLAIM_STATUSES:
        return jsonify(message=f"Unknown claim status '{status}'"), 400

    if is_admin_session():
        rows = storage.get_claims_by_status(status) if status else storage.get_all_claims()
    else:
        rows = storage.get_claims_by_user(current_user.id)
        if status:
            rows = [c for c in rows if c.status == status]
    return jsonify([c.to_dict() for c in rows]), 200


@claims.route("/claims/<int:claim_id>", methods=["GET"])
@authenticate_user
def get_claim(claim_id):
    claim = storage.get_claim(claim_id)
    if claim is None:
        return jsonify(message="Claim not found"), 404
    if not can_access(claim.user_id):
        return jsonify(message="Unauthorized"), 403
    return jsonify(claim.to_dict()), 200


# ==========================================================
# REVIEW (ADMIN)
# ==========================================================
@claims.route("/claims/<int:claim_id>/status", methods=["PUT"])
@authenticate_user
@admin_required
def review_claim(claim_id):
    decision = UpdateClaimStatus.model_validate(request.get_json(silent=True) or {})

    claim = storage.get_claim(claim_id)
    if claim is None:
        return jsonify(message="Claim not found"), 404
    if claim.status != "pending":
        return jsonify(message=f"Claim has already been {claim.status}"), 409

    updated = storage.update_claim_status(
        claim_id, decision.model_dump(), current_user.id, expected_status="pending"
    )
    if updated is None:
        # Another review landed between the read and the write
        return jsonify(message="Claim has already been reviewed"), 409

    current_app.logger.info("Claim %s %s by admin %s", claim_id, updated.status, current_user.id)
    body = updated.to_dict()
    _best_effort(_announce_review, updated)
    return jsonify(body), 200
