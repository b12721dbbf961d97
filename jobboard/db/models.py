"""ORM table models."""

import uuid
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    select,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    column_property,
    mapped_column,
    relationship,
)

from jobboard.core.enums import ApplicationStatus, JobStatus, Role, SenderRole


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp; columns are TIMESTAMP WITHOUT TIME ZONE."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _enum(enum_cls):
    return Enum(enum_cls, native_enum=False, length=20, validate_strings=True)


class User(Base):
    """User account (any role)."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    firstname: Mapped[str] = mapped_column(String(100))
    lastname: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password: Mapped[str] = mapped_column(String(255))
    role: Mapped[Role] = mapped_column(_enum(Role), default=Role.APPLICANT)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, default=None)
    gender: Mapped[str] = mapped_column(String(20), default="unspecified")
    email_verified: Mapped[Optional[datetime]] = mapped_column(DateTime, default=None)
    is_suspended: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=None)

    applicant_info: Mapped[Optional["Profile"]] = relationship(
        back_populates="user", uselist=False
    )
    applications: Mapped[List["Application"]] = relationship(back_populates="applicant")
    notifications: Mapped[List["Notification"]] = relationship(back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}"

    @property
    def status_label(self) -> str:
        return "Suspended" if self.is_suspended else "Active"


class Profile(Base):
    """Applicant profile, one-to-one with a user."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True)
    profession: Mapped[Optional[str]] = mapped_column(String(100), default=None)
    phone: Mapped[Optional[str]] = mapped_column(String(40), default=None)
    profile_summary: Mapped[Optional[str]] = mapped_column(Text, default=None)
    resume_url: Mapped[Optional[str]] = mapped_column(Text, default=None)
    image_url: Mapped[Optional[str]] = mapped_column(Text, default=None)
    profile_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    user: Mapped["User"] = relationship(back_populates="applicant_info")
    education: Mapped[List["Education"]] = relationship(
        back_populates="profile",
        order_by="Education.enrolled_date.desc()",
        cascade="all, delete-orphan",
    )
    experience: Mapped[List["Experience"]] = relationship(
        back_populates="profile",
        order_by="Experience.start_date.desc()",
        cascade="all, delete-orphan",
    )
    skills: Mapped[List["ApplicantSkillTag"]] = relationship(
        back_populates="profile", cascade="all, delete-orphan"
    )
    skill_tags: Mapped[List["SkillTag"]] = relationship(
        secondary="applicant_skill_tags", order_by="SkillTag.name", viewonly=True
    )
    conversations: Mapped[List["Conversation"]] = relationship(back_populates="applicant")


class Education(Base):
    __tablename__ = "educations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    applicant_profile_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    course: Mapped[str] = mapped_column(String(200))
    institution: Mapped[str] = mapped_column(String(200))
    graduated: Mapped[bool] = mapped_column(Boolean, default=False)
    enrolled_date: Mapped[Optional[date]] = mapped_column(Date, default=None)
    graduation_date: Mapped[Optional[date]] = mapped_column(Date, default=None)

    profile: Mapped["Profile"] = relationship(back_populates="education")


class Experience(Base):
    __tablename__ = "experiences"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    profile_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    job: Mapped[str] = mapped_column(String(200))
    company: Mapped[str] = mapped_column(String(200))
    start_date: Mapped[date] = mapped_column(Date)
    last_attended: Mapped[Optional[date]] = mapped_column(Date, default=None)

    profile: Mapped["Profile"] = relationship(back_populates="experience")


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(80), unique=True)

    skills: Mapped[List["SkillTag"]] = relationship(
        back_populates="category", order_by="SkillTag.name"
    )
    jobs: Mapped[List["Job"]] = relationship(back_populates="category")


class SkillTag(Base):
    __tablename__ = "skill_tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(80), unique=True)
    category_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), default=None
    )

    category: Mapped[Optional["Category"]] = relationship(back_populates="skills")


class ApplicantSkillTag(Base):
    __tablename__ = "applicant_skill_tags"

    profile_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True
    )
    skill_id: Mapped[str] = mapped_column(
        ForeignKey("skill_tags.id", ondelete="CASCADE"), primary_key=True
    )

    profile: Mapped["Profile"] = relationship(back_populates="skills")
    skill: Mapped["SkillTag"] = relationship()


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    title: Mapped[str] = mapped_column(String(120))
    description: Mapped[str] = mapped_column(Text)
    company: Mapped[str] = mapped_column(String(120))
    location: Mapped[str] = mapped_column(String(160))
    manpower: Mapped[int] = mapped_column(Integer)
    salary: Mapped[int] = mapped_column(Integer)
    status: Mapped[JobStatus] = mapped_column(_enum(JobStatus), default=JobStatus.OPEN)
    category_id: Mapped[str] = mapped_column(ForeignKey("categories.id"), index=True)
    posted_by_id: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id"), default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=None)

    category: Mapped["Category"] = relationship(back_populates="jobs")
    skills: Mapped[List["JobSkillTag"]] = relationship(cascade="all, delete-orphan")
    skill_tags: Mapped[List["SkillTag"]] = relationship(
        secondary="job_skill_tags", order_by="SkillTag.name", viewonly=True
    )
    applications: Mapped[List["Application"]] = relationship(
        back_populates="job",
        order_by="Application.submitted_at.desc()",
        cascade="all, delete-orphan",
    )


class JobSkillTag(Base):
    __tablename__ = "job_skill_tags"

    job_id: Mapped[str] = mapped_column(ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)
    skill_tag_id: Mapped[str] = mapped_column(
        ForeignKey("skill_tags.id", ondelete="CASCADE"), primary_key=True
    )

    skill_tag: Mapped["SkillTag"] = relationship()


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("applicant_id", "job_id", name="uq_application_applicant_job"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    job_id: Mapped[str] = mapped_column(ForeignKey("jobs.id", ondelete="CASCADE"), index=True)
    applicant_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    status: Mapped[ApplicationStatus] = mapped_column(
        _enum(ApplicationStatus), default=ApplicationStatus.SUBMITTED
    )
    form_data: Mapped[Any] = mapped_column(JSON, default=dict)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=None)

    job: Mapped["Job"] = relationship(back_populates="applications")
    applicant: Mapped["User"] = relationship(back_populates="applications")


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    message: Mapped[str] = mapped_column(Text, default="")
    type: Mapped[Optional[str]] = mapped_column(String(40), default=None)
    company: Mapped[Optional[str]] = mapped_column(String(120), default=None)
    job_title: Mapped[Optional[str]] = mapped_column(String(120), default=None)
    location: Mapped[Optional[str]] = mapped_column(String(160), default=None)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    user: Mapped["User"] = relationship(back_populates="notifications")


class Conversation(Base):
    """A thread between one applicant profile and the organization."""

    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    applicant_profile_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    subject: Mapped[Optional[str]] = mapped_column(String(200), default=None)
    last_message_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    applicant: Mapped["Profile"] = relationship(back_populates="conversations")
    messages: Mapped[List["Message"]] = relationship(
        back_populates="conversation",
        order_by="Message.created_at",
        cascade="all, delete-orphan",
    )


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    conversation_id: Mapped[str] = mapped_column(
        ForeignKey("conversations.id", ondelete="CASCADE"), index=True
    )
    sender_role: Mapped[SenderRole] = mapped_column(_enum(SenderRole))
    sender_user_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), default=None
    )
    content: Mapped[str] = mapped_column(Text)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    conversation: Mapped["Conversation"] = relationship(back_populates="messages")


class EmailVerificationToken(Base):
    __tablename__ = "email_verification_tokens"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True)
    expires: Mapped[datetime] = mapped_column(DateTime)


# Aggregate counts exposed as read-only columns (usable in ORDER BY too)
Job.applications_count = column_property(
    select(func.count(Application.id))
    .where(Application.job_id == Job.id)
    .correlate_except(Application)
    .scalar_subquery()
)

Category.skills_count = column_property(
    select(func.count(SkillTag.id))
    .where(SkillTag.category_id == Category.id)
    .correlate_except(SkillTag)
    .scalar_subquery()
)

Category.jobs_count = column_property(
    select(func.count(Job.id))
    .where(Job.category_id == Category.id)
    .correlate_except(Job)
    .scalar_subquery()
)

Conversation.message_count = column_property(
    select(func.count(Message.id))
    .where(Message.conversation_id == Conversation.id)
    .correlate_except(Message)
    .scalar_subquery()
)
