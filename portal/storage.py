# portal/storage.py
"""
Database accessors, one per entity per access pattern.

Lookups return ``None`` (or an empty list) when nothing matches; they never
raise for "not found". Every write commits on its own, so each operation is a
single unit of work. Payloads are expected to be validated already.
"""
from sqlalchemy import update

from . import db
from .models import (
    AcademicRecord,
    Claim,
    Course,
    Notification,
    StudyPlan,
    User,
    utcnow,
)


class DatabaseStorage:

    # --------------------------
    # Helpers
    # --------------------------
    @staticmethod
    def _add(obj):
        db.session.add(obj)
        db.session.commit()
        return obj

    @staticmethod
    def _merge(obj, data, stamp=False):
        for key, value in data.items():
            if hasattr(obj, key):
                setattr(obj, key, value)
        if stamp:
            obj.updated_at = utcnow()
        db.session.commit()
        return obj

    # ==========================================================
    #  Users
    # ==========================================================
    def get_user(self, user_id):
        return db.session.get(User, user_id)

    def get_user_by_username(self, username):
        return User.query.filter_by(username=username).first()

    def get_user_by_email(self, email):
        return User.query.filter_by(email=email).first()

    def get_user_by_program_id(self, program_id):
        return User.query.filter_by(program_id=program_id).first()

    def get_user_by_national_id(self, national_id):
        return User.query.filter_by(national_id=national_id).first()

    def get_all_users(self):
        return User.query.order_by(User.id).all()

    def create_user(self, data):
        data = dict(data)
        password = data.pop("password")
        user = User(**data)
        user.set_password(password)
        return self._add(user)

    def update_user(self, user_id, data):
        user = self.get_user(user_id)
        if user is None:
            return None
        data = dict(data)
        if "password" in data:
            user.set_password(data.pop("password"))
        return self._merge(user, data)

    # ==========================================================
    #  Claims
    # ==========================================================
    def get_claim(self, claim_id):
        return db.session.get(Claim, claim_id)

    def get_claims_by_user(self, user_id):
        return Claim.query.filter_by(user_id=user_id).order_by(Claim.id).all()

    def get_all_claims(self):
        return Claim.query.order_by(Claim.id).all()

    def get_claims_by_status(self, status):
        return Claim.query.filter_by(status=status).order_by(Claim.id).all()

    def create_claim(self, data):
        data = dict(data)
        # New claims always start out pending, whatever the caller passed
        for key in ("status", "review_comment", "reviewed_by", "reviewed_at"):
            data.pop(key, None)
        claim = Claim(status="pending", **data)
        return self._add(claim)

    def update_claim_status(self, claim_id, data, reviewer_id, expected_status=None):
        """Record a review decision in one UPDATE statement.

        Only the status, review comment, reviewer, review timestamp and update
        timestamp are written. When ``expected_status`` is given the row is only
        changed if its current status still matches; ``None`` is returned when no
        row was changed (unknown id, or the status moved on in the meantime).
        """
        now = utcnow()
        stmt = update(Claim).where(Claim.id == claim_id)
        if expected_status is not None:
            stmt = stmt.where(Claim.status == expected_status)
        stmt = stmt.values(
            status=data["status"],
            review_comment=data.get("review_comment") or None,
            reviewed_by=reviewer_id,
            reviewed_at=now,
            updated_at=now,
        ).execution_options(synchronize_session=False)

        result = db.session.execute(stmt)
        db.session.commit()
        if result.rowcount == 0:
            return None
        claim = self.get_claim(claim_id)
        db.session.refresh(claim)
        return claim

    # ==========================================================
    #  Academic records
    # ==========================================================
    def get_academic_record(self, record_id):
        return db.session.get(AcademicRecord, record_id)

    def get_academic_records_by_user(self, user_id):
        return (
            AcademicRecord.query.filter_by(user_id=user_id)
            .order_by(AcademicRecord.year, AcademicRecord.id)
            .all()
        )

    def create_academic_record(self, data):
        return self._add(AcademicRecord(**data))

    def update_academic_record(self, record_id, data):
        record = self.get_academic_record(record_id)
        if record is None:
            return None
        return self._merge(record, data, stamp=True)

    def delete_academic_record(self, record_id):
        """Delete a record and, through the cascade, its courses."""
        record = self.get_academic_record(record_id)
        if record is None:
            return False
        db.session.delete(record)
        db.session.commit()
        return True

    # ==========================================================
    #  Courses
    # ==========================================================
    def get_course(self, course_id):
        return db.session.get(Course, course_id)

    def get_courses_by_academic_record(self, record_id):
        return Course.query.filter_by(academic_record_id=record_id).order_by(Course.id).all()

    def create_course(self, data):
        return self._add(Course(**data))

    def update_course(self, course_id, data):
        course = self.get_course(course_id)
        if course is None:
            return None
        return self._merge(course, data)

    # ==========================================================
    #  Study plans
    # ==========================================================
    def get_study_plan(self, plan_id):
        return db.session.get(StudyPlan, plan_id)

    def get_study_plans_by_user(self, user_id):
        return StudyPlan.query.filter_by(user_id=user_id).order_by(StudyPlan.id).all()

    def create_study_plan(self, data):
        return self._add(StudyPlan(**data))

    # ==========================================================
    #  Notifications
    # ==========================================================
    def get_notification(self, notification_id):
        return db.session.get(Notification, notification_id)

    def get_notifications_by_user(self, user_id):
        return (
            Notification.query.filter_by(user_id=user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    def create_notification(self, data):
        return self._add(Notification(is_read=False, **data))

    def mark_notification_as_read(self, notification_id):
        notification = self.get_notification(notification_id)
        if notification is None:
            return None
        notification.is_read = True
        db.session.commit()
        return notification


storage = DatabaseStorage()
