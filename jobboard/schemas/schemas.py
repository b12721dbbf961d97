"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Wire format is camelCase; request bodies also accept snake_case.
"""

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from jobboard.core.enums import ApplicationStatus, Gender, JobStatus, Role, SenderRole


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================
# AUTH SCHEMAS
# ============================================================

class SignupRequest(BaseSchema):
    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    role: Role = Role.APPLICANT
    birth_date: Optional[date] = None
    gender: str = Field("unspecified", min_length=1, max_length=20)
    password: str = Field(..., min_length=8)
    confirm_password: str


class VerifyEmailRequest(BaseSchema):
    token: str = Field(..., min_length=1)


class ResendVerificationRequest(BaseSchema):
    email: EmailStr


class LoginRequest(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseSchema):
    id: str
    firstname: str
    lastname: str
    email: str
    role: Role
    birth_date: Optional[date] = None
    gender: str
    email_verified: Optional[datetime] = None
    is_suspended: bool
    created_at: datetime


class SessionUser(BaseSchema):
    id: str
    role: Role
    email: str
    firstname: str
    lastname: str
    profile_completed: bool = False


class TokenResponse(BaseSchema):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser


class MeResponse(BaseSchema):
    id: str
    role: Role
    email: str


# ============================================================
# SETTINGS SCHEMAS
# ============================================================

class AccountUpdate(BaseSchema):
    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None  # read-only, accepted and ignored
    birth_date: date
    gender: Gender


class PasswordChange(BaseSchema):
    current_password: str = Field(..., min_length=8)
    new_password: str = Field(..., min_length=8)
    confirm_password: str = Field(..., min_length=8)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileUpdate(BaseSchema):
    profession: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=40)
    profile_summary: Optional[str] = Field(None, max_length=2000)
    profile_completed: Optional[bool] = None

    @field_validator("profession", "phone", "profile_summary", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class EducationCreate(BaseSchema):
    course: str = Field(..., min_length=2)
    institution: str = Field(..., min_length=2)
    graduated: bool
    enrolled_date: date
    graduation_date: Optional[date] = None


class EducationUpdate(BaseSchema):
    course: Optional[str] = Field(None, min_length=2)
    institution: Optional[str] = Field(None, min_length=2)
    graduated: Optional[bool] = None
    enrolled_date: Optional[date] = None
    graduation_date: Optional[date] = None


class EducationResponse(BaseSchema):
    id: str
    course: str
    institution: str
    graduated: bool
    enrolled_date: Optional[date] = None
    graduation_date: Optional[date] = None


class ExperienceCreate(BaseSchema):
    job: str = Field(..., min_length=2)
    company: str = Field(..., min_length=1)
    start_date: date
    last_attended: Optional[date] = None


class ExperienceUpdate(BaseSchema):
    job: Optional[str] = Field(None, min_length=2)
    company: Optional[str] = Field(None, min_length=1)
    start_date: Optional[date] = None
    last_attended: Optional[date] = None


class ExperienceResponse(BaseSchema):
    id: str
    job: str
    company: str
    start_date: date
    last_attended: Optional[date] = None


class SkillsReplace(BaseSchema):
    skill_ids: List[str] = Field(default_factory=list)

    @field_validator("skill_ids")
    @classmethod
    def non_empty_ids(cls, v: List[str]) -> List[str]:
        if any(not s for s in v):
            raise ValueError("Skill ids must be non-empty strings")
        return v


class SkillResponse(BaseSchema):
    id: str
    name: str
    category_id: Optional[str] = None


class UserBrief(BaseSchema):
    firstname: str
    lastname: str
    email: str


class ProfileResponse(BaseSchema):
    id: str
    user_id: str
    profession: Optional[str] = None
    phone: Optional[str] = None
    profile_summary: Optional[str] = None
    resume_url: Optional[str] = None
    image_url: Optional[str] = None
    profile_completed: bool
    created_at: datetime
    education: List[EducationResponse] = []
    experience: List[ExperienceResponse] = []
    skills: List[SkillResponse] = Field(default_factory=list, validation_alias="skill_tags")
    user: UserBrief


# ============================================================
# CATEGORY SCHEMAS
# ============================================================

class CategoryCreate(BaseSchema):
    name: str = Field(..., min_length=2, max_length=80)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


CategoryUpdate = CategoryCreate


class CategoryBrief(BaseSchema):
    id: str
    name: str


class SkillBrief(BaseSchema):
    id: str
    name: str


class CategoryResponse(BaseSchema):
    id: str
    name: str
    skills_count: int = 0
    jobs_count: int = 0


class CategoryWithSkills(CategoryResponse):
    skills: List[SkillBrief] = []


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseSchema):
    title: str = Field(..., min_length=2, max_length=120)
    description: str = Field(..., min_length=10)
    company: str = Field(..., min_length=1, max_length=120)
    location: str = Field(..., min_length=1, max_length=160)
    manpower: int = Field(..., gt=0, le=100000)
    salary: int = Field(..., ge=0)
    category_id: str = Field(..., min_length=1)
    status: Optional[JobStatus] = None
    skills: Optional[List[str]] = None


class JobUpdate(BaseSchema):
    title: Optional[str] = Field(None, min_length=2, max_length=120)
    description: Optional[str] = Field(None, min_length=10)
    company: Optional[str] = Field(None, min_length=1, max_length=120)
    location: Optional[str] = Field(None, min_length=1, max_length=160)
    manpower: Optional[int] = Field(None, gt=0, le=100000)
    salary: Optional[int] = Field(None, ge=0)
    category_id: Optional[str] = Field(None, min_length=1)
    status: Optional[JobStatus] = None
    deleted_at: Optional[datetime] = None


class JobResponse(BaseSchema):
    id: str
    title: str
    description: str
    manpower: int
    salary: int
    company: str
    location: str
    status: JobStatus
    created_at: datetime
    category_id: str
    deleted_at: Optional[datetime] = None


class JobListItem(JobResponse):
    category: CategoryBrief
    skills: List[SkillBrief] = Field(default_factory=list, validation_alias="skill_tags")
    applications_count: int = 0


class ApplicantBrief(BaseSchema):
    id: str
    name: str = Field(validation_alias="full_name")
    email: str


class JobApplicationEntry(BaseSchema):
    id: str
    status: ApplicationStatus
    form_data: Any = None
    submitted_at: datetime
    applicant: ApplicantBrief


class JobDetail(JobListItem):
    applications: List[JobApplicationEntry] = []


class ApplyRequest(BaseSchema):
    cover_letter: str = Field(..., min_length=20, max_length=2000)
    resume_url: Optional[AnyHttpUrl] = None

    @field_validator("resume_url", mode="before")
    @classmethod
    def blank_url_is_none(cls, v):
        return None if v == "" else v


class MyApplication(BaseSchema):
    id: str
    job_id: str
    status: ApplicationStatus
    submitted_at: datetime
    form_data: Any = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class JobBrief(BaseSchema):
    id: str
    title: str
    company: str
    location: str


class ApplicationListItem(BaseSchema):
    id: str
    status: ApplicationStatus
    submitted_at: datetime
    job: JobBrief
    applicant: ApplicantBrief


class ApplicationDetail(ApplicationListItem):
    form_data: Any = None


class ApplicationStatusUpdate(BaseSchema):
    status: ApplicationStatus


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationResponse(BaseSchema):
    id: str
    user_id: str
    message: str
    type: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    location: Optional[str] = None
    is_read: bool
    created_at: datetime


# ============================================================
# MESSAGING SCHEMAS
# ============================================================

class ConversationCreate(BaseSchema):
    subject: Optional[str] = Field(None, max_length=200)
    initial_message: Optional[str] = None
    applicant_profile_id: Optional[str] = None


class MessageCreate(BaseSchema):
    content: Optional[str] = None


class ConversationApplicant(BaseSchema):
    id: str
    user: UserBrief


class ConversationResponse(BaseSchema):
    id: str
    applicant_profile_id: str
    subject: Optional[str] = None
    last_message_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    message_count: int = 0


class StaffConversationResponse(ConversationResponse):
    applicant: ConversationApplicant


class MessageResponse(BaseSchema):
    id: str
    conversation_id: str
    sender_role: SenderRole
    sender_user_id: Optional[str] = None
    content: str
    read_at: Optional[datetime] = None
    created_at: datetime


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class AdminUserCreate(BaseSchema):
    firstname: str = Field(..., min_length=1)
    lastname: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8)
    gender: str = Field(..., min_length=1)
    role: Role
    auto_verify: bool = False

    @field_validator("role")
    @classmethod
    def staff_role_only(cls, v: Role) -> Role:
        if not v.is_staff:
            raise ValueError("Role must be ADMIN or HR")
        return v


class AdminUserUpdate(BaseSchema):
    firstname: Optional[str] = Field(None, min_length=1)
    lastname: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = Field(None, min_length=1)
    is_suspended: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=8)

    @field_validator("role")
    @classmethod
    def staff_role_only(cls, v: Optional[Role]) -> Optional[Role]:
        if v is not None and not v.is_staff:
            raise ValueError("Role must be ADMIN or HR")
        return v


class AdminUserResponse(BaseSchema):
    id: str
    firstname: str
    lastname: str
    email: str
    role: Role
    is_suspended: bool
    email_verified: Optional[datetime] = None
    created_at: datetime
    name: str = Field(validation_alias="full_name")
    status_label: str
