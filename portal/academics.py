from flask import Blueprint, jsonify, request
from flask_login import current_user

from .middleware import authenticate_user, can_access, is_admin_session
from .schemas import (
    CreateAcademicRecord,
    CreateCourse,
    CreateStudyPlan,
    UpdateAcademicRecord,
    UpdateCourse,
)
from .storage import storage

academics = Blueprint("academics", __name__)


def _body():
    return request.get_json(silent=True) or {}


def _owned_record(record_id):
    """Return (record, error_response) for a record the caller may touch."""
    record = storage.get_academic_record(record_id)
    if record is None:
        return None, (jsonify(message="Academic record not found"), 404)
    if not can_access(record.user_id):
        return None, (jsonify(message="Unauthorized"), 403)
    return record, None


# ==========================================================
# ACADEMIC RECORDS
# ==========================================================
@academics.route("/academic-records", methods=["POST"])
@authenticate_user
def create_academic_record():
    data = CreateAcademicRecord.model_validate(_body()).model_dump()
    data["user_id"] = current_user.id
    record = storage.create_academic_record(data)
    return jsonify(record.to_dict()), 201


@academics.route("/academic-records", methods=["GET"])
@authenticate_user
def list_academic_records():
    user_id = current_user.id
    requested = request.args.get("userId", type=int)
    # Admins may look at a given student's records
    if requested and is_admin_session():
        user_id = requested
    rows = storage.get_academic_records_by_user(user_id)
    return jsonify([r.to_dict() for r in rows]), 200


@academics.route("/academic-records/<int:record_id>", methods=["PUT"])
@authenticate_user
def update_academic_record(record_id):
    record, error = _owned_record(record_id)
    if error:
        return error
    changes = UpdateAcademicRecord.model_validate(_body()).model_dump(exclude_unset=True)
    # gpa and ects_credits may be cleared; the other columns are NOT NULL
    for key in ("semester", "year", "is_completed"):
        if changes.get(key) is None:
            changes.pop(key, None)
    record = storage.update_academic_record(record.id, changes)
    return jsonify(record.to_dict()), 200


@academics.route("/academic-records/<int:record_id>", methods=["DELETE"])
@authenticate_user
def delete_academic_record(record_id):
    record, error = _owned_record(record_id)
    if error:
        return error
    storage.delete_academic_record(record.id)
    return jsonify(message="Academic record deleted"), 200


# ==========================================================
# COURSES
# ==========================================================
@academics.route("/academic-records/<int:record_id>/courses", methods=["GET"])
@authenticate_user
def list_courses(record_id):
    record, error = _owned_record(record_id)
    if error:
        return error
    rows = storage.get_courses_by_academic_record(record.id)
    return jsonify([c.to_dict() for c in rows]), 200


@academics.route("/courses", methods=["POST"])
@authenticate_user
def create_course():
    data = CreateCourse.model_validate(_body()).model_dump()
    _, error = _owned_record(data["academic_record_id"])
    if error:
        return error
    course = storage.create_course(data)
    return jsonify(course.to_dict()), 201


@academics.route("/courses/<int:course_id>", methods=["PUT"])
@authenticate_user
def update_course(course_id):
    course = storage.get_course(course_id)
    if course is None:
        return jsonify(message="Course not found"), 404
    _, error = _owned_record(course.academic_record_id)
    if error:
        return error

    changes = UpdateCourse.model_validate(_body()).model_dump(exclude_unset=True)
    for key in ("name", "credits", "status"):
        if changes.get(key) is None:
            changes.pop(key, None)
    course = storage.update_course(course_id, changes)
    return jsonify(course.to_dict()), 200


# ==========================================================
# STUDY PLANS
# ==========================================================
@academics.route("/study-plans", methods=["POST"])
@authenticate_user
def create_study_plan():
    data = CreateStudyPlan.model_validate(_body()).model_dump()
    data["user_id"] = current_user.id
    plan = storage.create_study_plan(data)
    return jsonify(plan.to_dict()), 201


@academics.route("/study-plans", methods=["GET"])
@authenticate_user
def list_study_plans():
    rows = storage.get_study_plans_by_user(current_user.id)
    return jsonify([p.to_dict() for p in rows]), 200


@academics.route("/study-plans/<int:plan_id>", methods=["GET"])
@authenticate_user
def get_study_plan(plan_id):
    plan = storage.get_study_plan(plan_id)
    if plan is None:
        return jsonify(message="Study plan not found"), 404
    if not can_access(plan.user_id):
        return jsonify(message="Unauthorized"), 403
    return jsonify(plan.to_dict()), 200
