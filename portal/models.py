# portal/models.py
from datetime import datetime, timezone

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from portal import db

CLAIM_STATUSES = ("pending", "approved", "rejected")
COURSE_STATUSES = ("Passed", "Failed", "In Progress", "Planned")
ROLES = ("student", "admin")


def utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model, UserMixin):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(150), unique=True, nullable=False)
    full_name = db.Column(db.String(200), nullable=False)
    national_id = db.Column(db.String(50), unique=True, nullable=False)
    program_id = db.Column(db.String(50), unique=True, nullable=False)
    phone_number = db.Column(db.String(30), nullable=False)
    current_address = db.Column(db.Text, nullable=False)

    # Academic program
    country_of_study = db.Column(db.String(100), nullable=False)
    university = db.Column(db.String(200), nullable=False)
    field_of_study = db.Column(db.String(200), nullable=False)
    degree_level = db.Column(db.String(50), nullable=False)
    sponsor_group = db.Column(db.String(100), nullable=False)
    sponsorship_period = db.Column(db.String(100), nullable=False)

    # Bank details
    bank_name = db.Column(db.String(200), nullable=False)
    bank_address = db.Column(db.Text, nullable=False)
    account_number = db.Column(db.String(100), nullable=False)
    swift_code = db.Column(db.String(50), nullable=False)

    role = db.Column(db.String(20), nullable=False, default="student")
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    claims = db.relationship(
        'Claim', back_populates='owner', foreign_keys='Claim.user_id',
        cascade='all, delete-orphan', lazy=True,
    )
    academic_records = db.relationship('AcademicRecord', backref='user', cascade='all, delete-orphan', lazy=True)
    study_plans = db.relationship('StudyPlan', backref='user', cascade='all, delete-orphan', lazy=True)
    notifications = db.relationship('Notification', backref='user', cascade='all, delete-orphan', lazy=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password or "")

    @property
    def is_admin(self):
        return self.role == "admin"

    def to_dict(self):
        """Public representation; the password hash is never included."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "fullName": self.full_name,
            "nationalId": self.national_id,
            "programId": self.program_id,
            "phoneNumber": self.phone_number,
            "currentAddress": self.current_address,
            "countryOfStudy": self.country_of_study,
            "university": self.university,
            "fieldOfStudy": self.field_of_study,
            "degreeLevel": self.degree_level,
            "sponsorGroup": self.sponsor_group,
            "sponsorshipPeriod": self.sponsorship_period,
            "bankName": self.bank_name,
            "bankAddress": self.bank_address,
            "accountNumber": self.account_number,
            "swiftCode": self.swift_code,
            "role": self.role,
            "createdAt": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"


class Claim(db.Model):
    __tablename__ = 'claims'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    # Single type, or a combined label when several sub-types were selected
    claim_type = db.Column(db.String(255), nullable=False)
    claim_details = db.Column(db.JSON, nullable=False, default=dict)
    amount = db.Column(db.Float, nullable=False)
    claim_period = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    receipt_file = db.Column(db.String(255), nullable=False)
    supporting_doc_file = db.Column(db.String(255), nullable=True)

    # Copied from the owner at submission time
    bank_name = db.Column(db.String(200), nullable=False)
    bank_address = db.Column(db.Text, nullable=False)
    account_number = db.Column(db.String(100), nullable=False)
    swift_code = db.Column(db.String(50), nullable=False)

    status = db.Column(db.String(20), nullable=False, default="pending", index=True)
    review_comment = db.Column(db.Text, nullable=True)
    reviewed_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    reviewed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    owner = db.relationship('User', back_populates='claims', foreign_keys=[user_id])
    reviewer = db.relationship('User', foreign_keys=[reviewed_by])

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "claimType": self.claim_type,
            "claimDetails": self.claim_details or {},
            "amount": self.amount,
            "claimPeriod": self.claim_period,
            "description": self.description,
            "receiptFile": self.receipt_file,
            "supportingDocFile": self.supporting_doc_file,
            "bankName": self.bank_name,
            "bankAddress": self.bank_address,
            "accountNumber": self.account_number,
            "swiftCode": self.swift_code,
            "status": self.status,
            "reviewComment": self.review_comment,
            "reviewedBy": self.reviewed_by,
            "reviewedAt": _iso(self.reviewed_at),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Claim {self.id} {self.claim_type} ({self.status})>"


class AcademicRecord(db.Model):
    __tablename__ = 'academic_records'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    semester = db.Column(db.String(50), nullable=False)
    year = db.Column(db.String(20), nullable=False)
    gpa = db.Column(db.Float, nullable=True)
    ects_credits = db.Column(db.Integer, nullable=True)
    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    courses = db.relationship(
        'Course', backref='academic_record', cascade='all, delete-orphan',
        order_by='Course.id', lazy=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "semester": self.semester,
            "year": self.year,
            "gpa": self.gpa,
            "ectsCredits": self.ects_credits,
            "isCompleted": self.is_completed,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Course(db.Model):
    __tablename__ = 'courses'

    id = db.Column(db.Integer, primary_key=True)
    academic_record_id = db.Column(
        db.Integer, db.ForeignKey('academic_records.id', ondelete='CASCADE'), nullable=False, index=True
    )
    name = db.Column(db.String(200), nullable=False)
    credits = db.Column(db.Integer, nullable=False)
    grade = db.Column(db.String(10), nullable=True)
    status = db.Column(db.String(20), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "academicRecordId": self.academic_record_id,
            "name": self.name,
            "credits": self.credits,
            "grade": self.grade,
            "status": self.status,
        }


class StudyPlan(db.Model):
    __tablename__ = 'study_plans'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    semester = db.Column(db.String(50), nullable=False)
    year = db.Column(db.String(20), nullable=False)
    planned_courses = db.Column(db.JSON, nullable=False, default=list)
    total_credits = db.Column(db.Integer, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "semester": self.semester,
            "year": self.year,
            "plannedCourses": list(self.planned_courses or []),
            "totalCredits": self.total_credits,
        }


class Notification(db.Model):
    __tablename__ = 'notifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "message": self.message,
            "isRead": self.is_read,
            "createdAt": _iso(self.created_at),
        }
