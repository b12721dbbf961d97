"""
Applicant Detail Routes (staff)

GET /applicant/{user_id} - Applicant profile with education, experience and skills
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from jobboard.core.auth import CurrentUser, require_staff
from jobboard.core.enums import Role
from jobboard.core.errors import NotFoundError
from jobboard.core.http import ok
from jobboard.db.database import get_db_session
from jobboard.db.models import Profile, User
from jobboard.schemas.schemas import EducationResponse, ExperienceResponse

router = APIRouter(prefix="/applicant", tags=["Applicants"])


@router.get("/{user_id}")
async def get_applicant(user_id: str, staff: CurrentUser = Depends(require_staff)):
    with get_db_session() as db:
        applicant = db.scalar(
            select(User)
            .where(User.id == user_id, User.role == Role.APPLICANT)
            .options(
                selectinload(User.applicant_info).selectinload(Profile.education),
                selectinload(User.applicant_info).selectinload(Profile.experience),
                selectinload(User.applicant_info).selectinload(Profile.skill_tags),
            )
        )
        if applicant is None:
            raise NotFoundError("Applicant not found.")

        profile = applicant.applicant_info
        return ok({
            "id": applicant.id,
            "image": profile.image_url if profile else None,
            "name": f"{applicant.lastname}, {applicant.firstname}",
            "email": applicant.email,
            "phone": profile.phone if profile else None,
            "summary": profile.profile_summary if profile else None,
            "profession": profile.profession if profile else None,
            "resumeUrl": profile.resume_url if profile else None,
            "skills": [s.name for s in profile.skill_tags] if profile else [],
            "education": [EducationResponse.model_validate(e) for e in profile.education] if profile else [],
            "experience": [ExperienceResponse.model_validate(e) for e in profile.experience] if profile else [],
        })
