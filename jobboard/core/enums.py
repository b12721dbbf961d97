"""
Closed enumerations shared by the ORM models, schemas and the auth gate.
"""

from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    HR = "HR"
    APPLICANT = "APPLICANT"

    @property
    def is_staff(self) -> bool:
        return self.sender_side() is SenderRole.ADMIN

    def sender_side(self) -> "SenderRole":
        """Which side of a conversation this role writes and reads as."""
        if self is Role.ADMIN or self is Role.HR:
            return SenderRole.ADMIN
        if self is Role.APPLICANT:
            return SenderRole.APPLICANT
        raise ValueError(f"Unhandled role: {self!r}")


class SenderRole(str, Enum):
    ADMIN = "ADMIN"
    APPLICANT = "APPLICANT"


class JobStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    FILLED = "FILLED"


class ApplicationStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    SHORTLISTED = "SHORTLISTED"
    INTERVIEWED = "INTERVIEWED"
    OFFERED = "OFFERED"
    HIRED = "HIRED"
    REJECTED = "REJECTED"


class Gender(str, Enum):
    male = "male"
    female = "female"
