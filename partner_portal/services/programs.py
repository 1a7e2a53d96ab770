from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from partner_portal.core.errors import NotFound, PolicyViolation, ValidationFailed
from partner_portal.models import Campaign, Program, ProgramEnrollment, Subject
from partner_portal.schemas.program import ProgramCreate, ProgramUpdate
from partner_portal.services.curricula import require_curriculum, resolve_subject_ids

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def get_program(db: Session, program_id: int) -> Optional[Program]:
    return db.query(Program).filter(Program.id == program_id).first()


def require_program(db: Session, program_id: int) -> Program:
    program = get_program(db, program_id)
    if not program:
        raise NotFound("Program not found")
    return program


def list_programs(
    db: Session,
    is_active: Optional[bool] = None,
    curriculum_id: Optional[int] = None,
) -> list[Program]:
    query = db.query(Program)
    if is_active is not None:
        query = query.filter(Program.is_active.is_(is_active))
    if curriculum_id is not None:
        query = query.filter(Program.curriculum_id == curriculum_id)
    return query.order_by(Program.id.asc()).all()


def normalize_timetable(timetable: dict, subjects: list[Subject], strict: bool = True) -> dict:
    """Key the timetable by lower-case weekday, sorted by slot time.

    With ``strict`` every slot must name one of the program's subjects;
    otherwise slots for subjects no longer taught are dropped.
    """
    taught = {s.name.lower() for s in subjects}
    result = {}
    for day, slots in (timetable or {}).items():
        key = day.strip().lower()
        if key not in WEEKDAYS:
            raise ValidationFailed(f"Unknown timetable day: {day}")
        rows = []
        for slot in slots:
            subject, time = slot["subject"], slot["time"]
            if subject.lower() not in taught:
                if not strict:
                    continue
                raise ValidationFailed(f'"{subject}" is not a subject of this program', day=key)
            rows.append({"subject": subject, "time": time})
        if rows:
            result[key] = sorted(rows, key=lambda row: row["time"])
    return {day: result[day] for day in WEEKDAYS if day in result}


def create_program(db: Session, payload: ProgramCreate) -> Program:
    if payload.curriculum_id is not None:
        require_curriculum(db, payload.curriculum_id)
    subjects = resolve_subject_ids(db, payload.subject_ids)

    program = Program(
        **payload.model_dump(exclude={"subject_ids", "timetable"}),
        timetable=normalize_timetable(payload.model_dump()["timetable"], subjects),
    )
    program.subjects = subjects
    db.add(program)
    db.commit()
    db.refresh(program)
    return program


def update_program(db: Session, program_id: int, payload: ProgramUpdate) -> Program:
    program = require_program(db, program_id)
    changes = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}

    start = changes.get("start_date", program.start_date)
    end = changes.get("end_date", program.end_date)
    if end < start:
        raise ValidationFailed("end_date must not be before start_date")

    if "curriculum_id" in changes:
        require_curriculum(db, changes["curriculum_id"])

    subjects = list(program.subjects)
    subjects_changed = "subject_ids" in changes
    if subjects_changed:
        subjects = resolve_subject_ids(db, changes.pop("subject_ids"))
        program.subjects = subjects
    if "timetable" in changes:
        program.timetable = normalize_timetable(changes.pop("timetable"), subjects)
    elif subjects_changed:
        program.timetable = normalize_timetable(program.timetable, subjects, strict=False)

    for key, value in changes.items():
        setattr(program, key, value)
    db.commit()
    db.refresh(program)
    return program


def delete_program(db: Session, program_id: int) -> dict:
    program = require_program(db, program_id)
    campaigns = db.query(func.count(Campaign.id)).filter(Campaign.program_id == program_id).scalar() or 0
    if campaigns:
        raise PolicyViolation(
            f'Cannot delete program "{program.name}". It is used by {campaigns} campaign(s).',
            blocking_campaigns=campaigns,
        )
    db.delete(program)
    db.commit()
    return {"success": True, "message": "Program deleted successfully"}


def get_purchases_count(db: Session, program_id: int) -> int:
    return (
        db.query(func.count(ProgramEnrollment.id))
        .filter(ProgramEnrollment.program_id == program_id)
        .scalar()
        or 0
    )
