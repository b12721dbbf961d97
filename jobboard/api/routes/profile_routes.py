"""
Applicant Profile Routes

GET /profile - Get own profile (created on first access)
PATCH /profile - Update profile fields
POST /profile/completed - Mark onboarding complete
GET /profile/educations - List education entries
POST /profile/educations - Add education entry
PATCH /profile/educations/{education_id} - Update education entry
DELETE /profile/educations/{education_id} - Remove education entry
GET /profile/experiences - List work experience
POST /profile/experiences - Add work experience
PATCH /profile/experiences/{experience_id} - Update work experience
DELETE /profile/experiences/{experience_id} - Remove work experience
GET /profile/skills - Selected skill ids
POST /profile/skills - Replace the selected skill set
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from jobboard.core.auth import CurrentUser, get_current_profile_id, get_current_user
from jobboard.core.errors import BadRequestError, NotFoundError
from jobboard.core.http import ok
from jobboard.db.database import get_db_session
from jobboard.db.models import ApplicantSkillTag, Education, Experience, Profile, SkillTag
from jobboard.schemas.schemas import (
    EducationCreate,
    EducationResponse,
    EducationUpdate,
    ExperienceCreate,
    ExperienceResponse,
    ExperienceUpdate,
    ProfileResponse,
    ProfileUpdate,
    SkillsReplace,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


def _load_profile(db: Session, user_id: str):
    return db.scalar(
        select(Profile)
        .where(Profile.user_id == user_id)
        .options(
            selectinload(Profile.education),
            selectinload(Profile.experience),
            selectinload(Profile.skill_tags),
            selectinload(Profile.user),
        )
    )


@router.get("")
async def get_profile(user: CurrentUser = Depends(get_current_user)):
    with get_db_session() as db:
        profile = _load_profile(db, user.id)
        if profile is None:
            db.add(Profile(user_id=user.id, profile_completed=False))
            db.flush()
            profile = _load_profile(db, user.id)
            logger.info("profile_created", user_id=user.id)
        return ok(ProfileResponse.model_validate(profile))


@router.patch("")
async def update_profile(data: ProfileUpdate, user: CurrentUser = Depends(get_current_user)):
    with get_db_session() as db:
        profile = _load_profile(db, user.id)
        if profile is None:
            raise NotFoundError("Profile not found")
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)
        db.flush()
        return ok(ProfileResponse.model_validate(profile))


@router.post("/completed")
async def mark_completed(profile_id: str = Depends(get_current_profile_id)):
    with get_db_session() as db:
        db.get(Profile, profile_id).profile_completed = True
    return ok(None)


# ============================================================
# EDUCATION
# ============================================================

def _owned_education(db: Session, profile_id: str, education_id: str) -> Education:
    education = db.scalar(
        select(Education).where(
            Education.id == education_id, Education.applicant_profile_id == profile_id
        )
    )
    if education is None:
        raise NotFoundError("Education not found")
    return education


@router.get("/educations")
async def list_educations(profile_id: str = Depends(get_current_profile_id)):
    with get_db_session() as db:
        rows = db.scalars(
            select(Education)
            .where(Education.applicant_profile_id == profile_id)
            .order_by(Education.enrolled_date.desc())
        ).all()
        return ok([EducationResponse.model_validate(r) for r in rows])


@router.post("/educations", status_code=201)
async def add_education(data: EducationCreate, profile_id: str = Depends(get_current_profile_id)):
    # A graduate without an explicit date is assumed to have graduated at enrollment
    graduation_date = data.graduation_date or (data.enrolled_date if data.graduated else None)
    with get_db_session() as db:
        education = Education(
            applicant_profile_id=profile_id,
            course=data.course,
            institution=data.institution,
            graduated=data.graduated,
            enrolled_date=data.enrolled_date,
            graduation_date=graduation_date,
        )
        db.add(education)
        db.flush()
        return ok(EducationResponse.model_validate(education))


@router.patch("/educations/{education_id}")
async def update_education(
    education_id: str, data: EducationUpdate, profile_id: str = Depends(get_current_profile_id)
):
    with get_db_session() as db:
        education = _owned_education(db, profile_id, education_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(education, field, value)
        db.flush()
        return ok(EducationResponse.model_validate(education))


@router.delete("/educations/{education_id}")
async def delete_education(education_id: str, profile_id: str = Depends(get_current_profile_id)):
    with get_db_session() as db:
        db.delete(_owned_education(db, profile_id, education_id))
    return ok({"id": education_id})


# ============================================================
# EXPERIENCE
# ============================================================

def _owned_experience(db: Session, profile_id: str, experience_id: str) -> Experience:
    experience = db.scalar(
        select(Experience).where(Experience.id == experience_id, Experience.profile_id == profile_id)
    )
    if experience is None:
        raise NotFoundError("Experience not found")
    return experience


@router.get("/experiences")
async def list_experiences(profile_id: str = Depends(get_current_profile_id)):
    with get_db_session() as db:
        rows = db.scalars(
            select(Experience)
            .where(Experience.profile_id == profile_id)
            .order_by(Experience.start_date.desc())
        ).all()
        return ok([ExperienceResponse.model_validate(r) for r in rows])


@router.post("/experiences", status_code=201)
async def add_experience(data: ExperienceCreate, profile_id: str = Depends(get_current_profile_id)):
    with get_db_session() as db:
        experience = Experience(profile_id=profile_id, **data.model_dump())
        db.add(experience)
        db.flush()
        return ok(ExperienceResponse.model_validate(experience))


@router.patch("/experiences/{experience_id}")
async def update_experience(
    experience_id: str, data: ExperienceUpdate, profile_id: str = Depends(get_current_profile_id)
):
    with get_db_session() as db:
        experience = _owned_experience(db, profile_id, experience_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(experience, field, value)
        db.flush()
        return ok(ExperienceResponse.model_validate(experience))


@router.delete("/experiences/{experience_id}")
async def delete_experience(experience_id: str, profile_id: str = Depends(get_current_profile_id)):
    with get_db_session() as db:
        db.delete(_owned_experience(db, profile_id, experience_id))
    return ok({"id": experience_id})


# ============================================================
# SKILLS
# ============================================================

@router.get("/skills")
async def get_skills(profile_id: str = Depends(get_current_profile_id)):
    with get_db_session() as db:
        skill_ids = db.scalars(
            select(ApplicantSkillTag.skill_id).where(ApplicantSkillTag.profile_id == profile_id)
        ).all()
    return ok(list(skill_ids))


@router.post("/skills")
async def replace_skills(data: SkillsReplace, profile_id: str = Depends(get_current_profile_id)):
    """
    Replace the selected skills: delete all, then insert all, in one transaction.

    Any failure rolls back to the previous set.
    """
    skill_ids = list(dict.fromkeys(data.skill_ids))
    with get_db_session() as db:
        db.execute(delete(ApplicantSkillTag).where(ApplicantSkillTag.profile_id == profile_id))
        if skill_ids:
            known = set(db.scalars(select(SkillTag.id).where(SkillTag.id.in_(skill_ids))).all())
            if len(known) != len(skill_ids):
                raise BadRequestError("One or more skill ids are invalid.")
            db.add_all(ApplicantSkillTag(profile_id=profile_id, skill_id=s) for s in skill_ids)
            db.flush()

    logger.info("profile_skills_replaced", profile_id=profile_id, count=len(skill_ids))
    return ok(skill_ids)
