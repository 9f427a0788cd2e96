"""
Request payload schemas.

JSON bodies use camelCase keys; the models below expose snake_case attributes
so ``model_dump()`` feeds straight into the storage layer. Unknown keys (for
example a client-supplied ``status`` on a new claim) are ignored.
"""
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


NonEmptyStr = Annotated[str, Field(min_length=1)]
# Passwords are checked and hashed exactly as typed
Password = Annotated[str, StringConstraints(strip_whitespace=False, min_length=6)]


# ==========================================================
#  Auth / users
# ==========================================================
class LoginCredentials(ApiModel):
    username: str = Field(..., min_length=1)
    password: Annotated[str, StringConstraints(strip_whitespace=False, min_length=1)]


class RegisterUser(ApiModel):
    username: str = Field(..., min_length=3)
    password: Password
    email: EmailStr
    full_name: NonEmptyStr
    national_id: NonEmptyStr
    program_id: NonEmptyStr
    phone_number: NonEmptyStr
    current_address: NonEmptyStr
    country_of_study: NonEmptyStr
    university: NonEmptyStr
    field_of_study: NonEmptyStr
    degree_level: NonEmptyStr
    sponsor_group: NonEmptyStr
    sponsorship_period: NonEmptyStr
    bank_name: NonEmptyStr
    bank_address: NonEmptyStr
    account_number: NonEmptyStr
    swift_code: NonEmptyStr


class UpdateUser(ApiModel):
    """Partial profile update; only the keys present in the body are applied."""

    password: Optional[Password] = None
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=1)
    phone_number: Optional[str] = Field(None, min_length=1)
    current_address: Optional[str] = Field(None, min_length=1)
    country_of_study: Optional[str] = Field(None, min_length=1)
    university: Optional[str] = Field(None, min_length=1)
    field_of_study: Optional[str] = Field(None, min_length=1)
    degree_level: Optional[str] = Field(None, min_length=1)
    sponsor_group: Optional[str] = Field(None, min_length=1)
    sponsorship_period: Optional[str] = Field(None, min_length=1)
    bank_name: Optional[str] = Field(None, min_length=1)
    bank_address: Optional[str] = Field(None, min_length=1)
    account_number: Optional[str] = Field(None, min_length=1)
    swift_code: Optional[str] = Field(None, min_length=1)
    role: Optional[Literal["student", "admin"]] = None


# ==========================================================
#  Claims
# ==========================================================
class CreateClaim(ApiModel):
    claim_type: NonEmptyStr
    # Per-type breakdown as entered by the client; stored, never reconciled with amount
    claim_details: Dict[str, float] = Field(default_factory=dict)
    amount: float = Field(..., gt=0)
    claim_period: NonEmptyStr
    description: Optional[str] = None
    receipt_file: NonEmptyStr
    supporting_doc_file: Optional[str] = None
    bank_name: Optional[str] = None
    bank_address: Optional[str] = None
    account_number: Optional[str] = None
    swift_code: Optional[str] = None


class UpdateClaimStatus(ApiModel):
    status: Literal["approved", "rejected"]
    review_comment: Optional[str] = None


# ==========================================================
#  Academics
# ==========================================================
class CreateAcademicRecord(ApiModel):
    semester: NonEmptyStr
    year: NonEmptyStr
    gpa: Optional[float] = Field(None, ge=0)
    ects_credits: Optional[int] = Field(None, ge=0)
    is_completed: bool = False


class UpdateAcademicRecord(ApiModel):
    semester: Optional[str] = Field(None, min_length=1)
    year: Optional[str] = Field(None, min_length=1)
    gpa: Optional[float] = Field(None, ge=0)
    ects_credits: Optional[int] = Field(None, ge=0)
    is_completed: Optional[bool] = None


CourseStatus = Literal["Passed", "Failed", "In Progress", "Planned"]


class CreateCourse(ApiModel):
    academic_record_id: int
    name: NonEmptyStr
    credits: int = Field(..., gt=0)
    grade: Optional[str] = None
    status: CourseStatus


class UpdateCourse(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    credits: Optional[int] = Field(None, gt=0)
    grade: Optional[str] = None
    status: Optional[CourseStatus] = None


class CreateStudyPlan(ApiModel):
    semester: NonEmptyStr
    year: NonEmptyStr
    planned_courses: List[str] = Field(default_factory=list)
    total_credits: int = Field(..., gt=0)
