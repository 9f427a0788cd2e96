import pytest
from conftest import student_payload

from portal.models import AcademicRecord, Course
from portal.schemas import RegisterUser
from portal.storage import storage


@pytest.fixture
def owner(app_ctx):
    data = RegisterUser.model_validate(student_payload(42)).model_dump()
    return storage.create_user(data)


def new_claim(owner, **overrides):
    data = {
        "user_id": owner.id,
        "claim_type": "Travel",
        "amount": 120.0,
        "claim_period": "Spring 2025",
        "receipt_file": "1700000000000-ticket.pdf",
        "bank_name": owner.bank_name,
        "bank_address": owner.bank_address,
        "account_number": owner.account_number,
        "swift_code": owner.swift_code,
    }
    data.update(overrides)
    return storage.create_claim(data)


def test_lookups_return_none_when_missing(app_ctx):
    assert storage.get_user(999) is None
    assert storage.get_user_by_username("nobody") is None
    assert storage.get_claim(999) is None
    assert storage.get_notification(999) is None
    assert storage.get_claims_by_user(999) == []
    assert storage.update_user(999, {"university": "x"}) is None
    assert storage.update_academic_record(999, {"gpa": 1.0}) is None
    assert storage.mark_notification_as_read(999) is None
    assert storage.delete_academic_record(999) is False


def test_passwords_are_hashed(owner):
    assert owner.password_hash != "secret123"
    assert owner.check_password("secret123")

    storage.update_user(owner.id, {"password": "another-one"})
    assert owner.check_password("another-one")
    assert not owner.check_password("secret123")


def test_update_merges_only_given_keys(owner):
    storage.update_user(owner.id, {"university": "LMU Munich"})
    fresh = storage.get_user(owner.id)
    assert fresh.university == "LMU Munich"
    assert fresh.field_of_study == "Mechanical Engineering"


def test_create_claim_forces_pending(owner):
    claim = new_claim(owner, status="approved", review_comment="sneaky")
    assert claim.status == "pending"
    assert claim.review_comment is None
    assert claim.reviewed_by is None


def test_update_claim_status_writes_review_fields(owner):
    claim = new_claim(owner)
    admin = storage.get_user_by_username("admin")

    updated = storage.update_claim_status(claim.id, {"status": "rejected", "review_comment": ""}, admin.id)

    assert updated.status == "rejected"
    assert updated.review_comment is None
    assert updated.reviewed_by == admin.id
    assert updated.reviewed_at is not None
    assert updated.amount == 120.0
    assert updated.receipt_file == "1700000000000-ticket.pdf"


def test_update_claim_status_respects_expected_status(owner):
    claim = new_claim(owner)
    admin = storage.get_user_by_username("admin")

    first = storage.update_claim_status(claim.id, {"status": "approved"}, admin.id, expected_status="pending")
    second = storage.update_claim_status(claim.id, {"status": "rejected"}, admin.id, expected_status="pending")

    assert first.status == "approved"
    assert second is None
    assert storage.get_claim(claim.id).status == "approved"
    assert storage.update_claim_status(999, {"status": "approved"}, admin.id) is None


def test_claims_by_status(owner):
    kept = new_claim(owner)
    approved = new_claim(owner, claim_type="Books")
    admin = storage.get_user_by_username("admin")
    storage.update_claim_status(approved.id, {"status": "approved"}, admin.id)

    assert [c.id for c in storage.get_claims_by_status("pending")] == [kept.id]
    assert [c.id for c in storage.get_claims_by_status("approved")] == [approved.id]


def test_record_update_stamps_and_delete_cascades(owner):
    record = storage.create_academic_record({"user_id": owner.id, "semester": "Winter", "year": "2024"})
    before = record.updated_at
    storage.create_course({"academic_record_id": record.id, "name": "Statics", "credits": 5, "status": "Planned"})

    updated = storage.update_academic_record(record.id, {"gpa": 3.1})
    assert updated.gpa == 3.1
    assert updated.updated_at >= before

    assert storage.delete_academic_record(record.id) is True
    assert AcademicRecord.query.count() == 0
    assert Course.query.count() == 0


def test_notifications_newest_first(owner):
    first = storage.create_notification({"user_id": owner.id, "title": "One", "message": "first"})
    second = storage.create_notification({"user_id": owner.id, "title": "Two", "message": "second"})

    assert [n.id for n in storage.get_notifications_by_user(owner.id)] == [second.id, first.id]
    assert first.is_read is False
    assert storage.mark_notification_as_read(first.id).is_read is True
