from datetime import date
from decimal import Decimal

import pytest

from partner_portal.core.errors import Conflict, NotFound, PolicyViolation, ValidationFailed
from partner_portal.schemas.curriculum import CurriculumCreate, CurriculumUpdate, SubjectCreate, SubjectUpdate
from partner_portal.schemas.program import ProgramCreate, ProgramUpdate
from partner_portal.services.curricula import (
    create_curriculum,
    create_subject,
    delete_curriculum,
    delete_subject,
    list_curricula,
    update_curriculum,
    update_subject,
)
from partner_portal.services.programs import create_program, list_programs, update_program
from tests.factories import auth_headers, make_super_admin


def _subjects(db, *names):
    return [create_subject(db, SubjectCreate(name=name)) for name in names]


def _program(db, curriculum_id=None, subject_ids=(), timetable=None):
    return create_program(
        db,
        ProgramCreate(
            name="Holiday Tuition",
            curriculum_id=curriculum_id,
            start_date=date(2026, 4, 1),
            end_date=date(2026, 4, 30),
            pricing=Decimal("300.00"),
            subject_ids=list(subject_ids),
            timetable=timetable or {},
        ),
    )


def test_curriculum_names_are_unique_ignoring_case(seeded):
    cbc = create_curriculum(seeded, CurriculumCreate(name="  CBC   Grade 6 ", description="Competency based"))
    assert cbc.name == "CBC Grade 6"

    with pytest.raises(Conflict):
        create_curriculum(seeded, CurriculumCreate(name="cbc grade 6"))

    igcse = create_curriculum(seeded, CurriculumCreate(name="IGCSE"))
    with pytest.raises(Conflict):
        update_curriculum(seeded, igcse.id, CurriculumUpdate(name="CBC Grade 6"))

    updated = update_curriculum(seeded, igcse.id, CurriculumUpdate(description="Cambridge"))
    assert updated.name == "IGCSE"
    assert [c.name for c in list_curricula(seeded)] == ["CBC Grade 6", "IGCSE"]


def test_curriculum_in_use_cannot_be_deleted(seeded):
    curriculum = create_curriculum(seeded, CurriculumCreate(name="8-4-4"))
    _program(seeded, curriculum_id=curriculum.id)

    with pytest.raises(PolicyViolation) as exc:
        delete_curriculum(seeded, curriculum.id)
    assert exc.value.extra["blocking_programs"] == 1

    unused = create_curriculum(seeded, CurriculumCreate(name="Unused"))
    assert delete_curriculum(seeded, unused.id)["success"] is True


def test_program_links_curriculum_subjects_and_timetable(seeded):
    curriculum = create_curriculum(seeded, CurriculumCreate(name="CBC"))
    maths, english = _subjects(seeded, "Mathematics", "English")

    program = _program(
        seeded,
        curriculum_id=curriculum.id,
        subject_ids=[maths.id, english.id, maths.id],
        timetable={
            "Monday": [{"subject": "English", "time": "10:00"}, {"subject": "Mathematics", "time": "08:00"}],
            "Wednesday": [{"subject": "mathematics", "time": "09:00"}],
        },
    )

    assert program.curriculum_id == curriculum.id
    assert [s.name for s in program.subjects] == ["English", "Mathematics"]
    assert list(program.timetable) == ["monday", "wednesday"]
    assert [slot["time"] for slot in program.timetable["monday"]] == ["08:00", "10:00"]
    assert [p.id for p in list_programs(seeded, curriculum_id=curriculum.id)] == [program.id]


def test_program_rejects_bad_references(seeded):
    (maths,) = _subjects(seeded, "Mathematics")

    with pytest.raises(NotFound):
        _program(seeded, curriculum_id=999)
    with pytest.raises(ValidationFailed) as exc:
        _program(seeded, subject_ids=[maths.id, 998])
    assert exc.value.extra["invalid_ids"] == [998]
    with pytest.raises(ValidationFailed):
        _program(seeded, subject_ids=[maths.id], timetable={"Monday": [{"subject": "Physics", "time": "08:00"}]})
    with pytest.raises(ValidationFailed):
        _program(seeded, subject_ids=[maths.id], timetable={"Funday": [{"subject": "Mathematics", "time": "08:00"}]})


def test_dropping_a_subject_prunes_its_slots(seeded):
    maths, english = _subjects(seeded, "Mathematics", "English")
    program = _program(
        seeded,
        subject_ids=[maths.id, english.id],
        timetable={"Tuesday": [{"subject": "Mathematics", "time": "08:00"}, {"subject": "English", "time": "09:00"}]},
    )

    updated = update_program(seeded, program.id, ProgramUpdate(subject_ids=[english.id]))
    assert [s.name for s in updated.subjects] == ["English"]
    assert updated.timetable == {"tuesday": [{"subject": "English", "time": "09:00"}]}

    with pytest.raises(ValidationFailed):
        update_program(
            seeded,
            program.id,
            ProgramUpdate(timetable={"Friday": [{"subject": "Mathematics", "time": "08:00"}]}),
        )


def test_subject_rename_and_delete_follow_into_programs(seeded):
    maths, english = _subjects(seeded, "Mathematics", "English")
    program = _program(
        seeded,
        subject_ids=[maths.id, english.id],
        timetable={"Monday": [{"subject": "Mathematics", "time": "08:00"}, {"subject": "English", "time": "09:00"}]},
    )

    with pytest.raises(Conflict):
        update_subject(seeded, maths.id, SubjectUpdate(name="english"))

    update_subject(seeded, maths.id, SubjectUpdate(name="Maths"))
    seeded.refresh(program)
    assert program.timetable["monday"][0]["subject"] == "Maths"

    delete_subject(seeded, english.id)
    seeded.refresh(program)
    assert [s.name for s in program.subjects] == ["Maths"]
    assert program.timetable == {"monday": [{"subject": "Maths", "time": "08:00"}]}


def test_curricula_api(client, seeded):
    root, _ = make_super_admin(seeded)
    headers = auth_headers(seeded, root)

    res = client.post("/api/v1/curricula", headers=headers, json={"name": "CBC", "description": "Grade 4-6"})
    assert res.status_code == 201
    curriculum_id = res.json()["id"]

    res = client.post("/api/v1/curricula/subjects", headers=headers, json={"name": "Science"})
    assert res.status_code == 201
    subject_id = res.json()["id"]

    res = client.post(
        "/api/v1/programs",
        headers=headers,
        json={
            "name": "Science Camp",
            "curriculum_id": curriculum_id,
            "start_date": "2026-05-01",
            "end_date": "2026-05-05",
            "pricing": "250.00",
            "subject_ids": [subject_id],
            "timetable": {"Thursday": [{"subject": "Science", "time": "14:00"}]},
        },
    )
    assert res.status_code == 201
    body = res.json()
    assert body["curriculum_id"] == curriculum_id
    assert body["subjects"][0]["name"] == "Science"
    assert body["timetable"] == {"thursday": [{"subject": "Science", "time": "14:00"}]}

    res = client.delete(f"/api/v1/curricula/{curriculum_id}", headers=headers)
    assert res.status_code == 403
    assert res.json()["code"] == "policy_violation"
