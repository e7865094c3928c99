"""
Integration tests for the teacher audit endpoints.
"""

from contaedu.app.models.course import Course
from contaedu.app.models.enums import UserRole
from contaedu.tests.factories import PURCHASE_LINES, auth_headers, create_user, entry_payload


async def record_purchase(client, student, exercise_id=None):
    response = await client.post(
        "/v1/journal/entries",
        json=entry_payload(PURCHASE_LINES, exercise_id=exercise_id),
        headers=auth_headers(student),
    )
    assert response.status_code == 201
    return response.json()


async def test_teacher_sees_student_journal_ledger_and_trial_balance(client, classroom):
    student = classroom["student"]
    await record_purchase(client, student, classroom["exercise"].id)
    headers = auth_headers(classroom["teacher"])

    journal = await client.get(f"/v1/audit/students/{student.id}/journal", headers=headers)
    ledger = await client.get(f"/v1/audit/students/{student.id}/ledger", headers=headers)
    trial_balance = await client.get(f"/v1/audit/students/{student.id}/trial-balance", headers=headers)

    assert journal.status_code == 200
    assert len(journal.json()) == 1
    assert [a["account_code"] for a in ledger.json()] == ["472", "572", "600"]
    assert trial_balance.json()["totals"]["debit_sum"] == "1210.00"
    assert trial_balance.json()["totals"]["credit_sum"] == "1210.00"


async def test_audit_respects_exercise_filter(client, classroom):
    student = classroom["student"]
    await record_purchase(client, student, classroom["exercise"].id)
    await record_purchase(client, student)

    response = await client.get(
        f"/v1/audit/students/{student.id}/journal",
        params={"exercise_id": classroom["exercise"].id},
        headers=auth_headers(classroom["teacher"]),
    )

    assert len(response.json()) == 1


async def test_other_teacher_cannot_audit(client, classroom, db_session):
    outsider = await create_user(db_session, "lruiz", UserRole.TEACHER)
    course = Course(
        name="2º ADFI", teacher_id=outsider.id,
        school_year_id=classroom["year"].id, enrollment_code="OTHER001",
    )
    db_session.add(course)
    await db_session.commit()

    response = await client.get(
        f"/v1/audit/students/{classroom['student'].id}/ledger",
        headers=auth_headers(outsider),
    )

    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"


async def test_admin_can_audit_any_student(client, classroom):
    response = await client.get(
        f"/v1/audit/students/{classroom['student'].id}/trial-balance",
        headers=auth_headers(classroom["admin"]),
    )

    assert response.status_code == 200


async def test_students_cannot_use_audit_endpoints(client, classroom):
    response = await client.get(
        f"/v1/audit/students/{classroom['classmate'].id}/journal",
        headers=auth_headers(classroom["student"]),
    )

    assert response.status_code == 403


async def test_audit_of_unknown_student(client, classroom):
    response = await client.get("/v1/audit/students/9999/journal", headers=auth_headers(classroom["teacher"]))

    assert response.status_code == 404
