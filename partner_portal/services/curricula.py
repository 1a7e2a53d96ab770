"""Curricula and subjects that programs are built from.

A program belongs to at most one curriculum and teaches a set of subjects.
Curricula still referenced by programs cannot be deleted; deleting a subject
detaches it from every program and clears its timetable slots.
"""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from partner_portal.core.errors import Conflict, NotFound, PolicyViolation, ValidationFailed
from partner_portal.models import Curriculum, Program, Subject
from partner_portal.schemas.curriculum import CurriculumCreate, CurriculumUpdate, SubjectCreate, SubjectUpdate

logger = logging.getLogger(__name__)


def _clean(name: str) -> str:
    return " ".join((name or "").split())


def list_curricula(db: Session) -> list[Curriculum]:
    return db.query(Curriculum).order_by(Curriculum.name.asc()).all()


def get_curriculum(db: Session, curriculum_id: int) -> Optional[Curriculum]:
    return db.query(Curriculum).filter(Curriculum.id == curriculum_id).first()


def require_curriculum(db: Session, curriculum_id: int) -> Curriculum:
    curriculum = get_curriculum(db, curriculum_id)
    if not curriculum:
        raise NotFound("Curriculum not found")
    return curriculum


def _curriculum_name_taken(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Curriculum).filter(func.lower(Curriculum.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Curriculum.id != exclude_id)
    return query.first() is not None


def create_curriculum(db: Session, payload: CurriculumCreate) -> Curriculum:
    name = _clean(payload.name)
    if _curriculum_name_taken(db, name):
        raise Conflict(f'Curriculum "{name}" already exists')
    curriculum = Curriculum(name=name, description=payload.description)
    db.add(curriculum)
    db.commit()
    db.refresh(curriculum)
    return curriculum


def update_curriculum(db: Session, curriculum_id: int, payload: CurriculumUpdate) -> Curriculum:
    curriculum = require_curriculum(db, curriculum_id)
    fields_set = payload.model_fields_set
    if "name" in fields_set and payload.name is not None:
        name = _clean(payload.name)
        if _curriculum_name_taken(db, name, exclude_id=curriculum.id):
            raise Conflict(f'Curriculum "{name}" already exists')
        curriculum.name = name
    if "description" in fields_set:
        curriculum.description = payload.description
    db.commit()
    db.refresh(curriculum)
    return curriculum


def delete_curriculum(db: Session, curriculum_id: int) -> dict:
    curriculum = require_curriculum(db, curriculum_id)
    programs = db.query(func.count(Program.id)).filter(Program.curriculum_id == curriculum_id).scalar() or 0
    if programs:
        raise PolicyViolation(
            f'Cannot delete curriculum "{curriculum.name}". It is used by {programs} program(s).',
            blocking_programs=programs,
        )
    db.delete(curriculum)
    db.commit()
    return {"success": True, "message": "Curriculum deleted successfully"}


def list_subjects(db: Session) -> list[Subject]:
    return db.query(Subject).order_by(Subject.name.asc()).all()


def get_subject(db: Session, subject_id: int) -> Optional[Subject]:
    return db.query(Subject).filter(Subject.id == subject_id).first()


def require_subject(db: Session, subject_id: int) -> Subject:
    subject = get_subject(db, subject_id)
    if not subject:
        raise NotFound("Subject not found")
    return subject


def get_subject_by_name(db: Session, name: str) -> Optional[Subject]:
    return db.query(Subject).filter(func.lower(Subject.name) == _clean(name).lower()).first()


def create_subject(db: Session, payload: SubjectCreate) -> Subject:
    name = _clean(payload.name)
    if get_subject_by_name(db, name):
        raise Conflict(f'Subject "{name}" already exists')
    subject = Subject(name=name)
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


def update_subject(db: Session, subject_id: int, payload: SubjectUpdate) -> Subject:
    subject = require_subject(db, subject_id)
    name = _clean(payload.name)
    clash = get_subject_by_name(db, name)
    if clash and clash.id != subject.id:
        raise Conflict(f'Subject "{name}" already exists')
    previous = subject.name.lower()
    for program in subject.programs:
        program.timetable = {
            day: [
                {**slot, "subject": name} if slot["subject"].lower() == previous else slot
                for slot in slots
            ]
            for day, slots in (program.timetable or {}).items()
        }
    subject.name = name
    db.commit()
    db.refresh(subject)
    return subject


def delete_subject(db: Session, subject_id: int) -> dict:
    subject = require_subject(db, subject_id)
    detached = len(subject.programs)
    dropped = subject.name.lower()
    for program in subject.programs:
        timetable = {}
        for day, slots in (program.timetable or {}).items():
            kept = [slot for slot in slots if slot["subject"].lower() != dropped]
            if kept:
                timetable[day] = kept
        program.timetable = timetable
    db.delete(subject)
    db.commit()
    if detached:
        logger.info("Deleted subject id=%s, detached from %s program(s)", subject_id, detached)
    return {"success": True, "message": "Subject deleted successfully"}


def resolve_subject_ids(db: Session, subject_ids: list[int]) -> list[Subject]:
    """Load subjects by id, rejecting the whole list if any id is unknown."""
    wanted = list(dict.fromkeys(subject_ids))
    if not wanted:
        return []
    subjects = db.query(Subject).filter(Subject.id.in_(wanted)).all()
    found = {s.id for s in subjects}
    missing = [sid for sid in wanted if sid not in found]
    if missing:
        raise ValidationFailed("One or more subject ids are invalid", invalid_ids=missing)
    return subjects
