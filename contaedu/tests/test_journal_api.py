"""
Integration tests for the journal, ledger and trial balance endpoints.
"""

from sqlalchemy import select, func

from contaedu.app.models.journal import JournalEntry, JournalLine
from contaedu.tests.factories import PURCHASE_LINES, auth_headers, entry_payload


async def test_create_entry_returns_numbered_entry(client, classroom):
    student = classroom["student"]
    exercise_id = classroom["exercise"].id

    response = await client.post(
        "/v1/journal/entries",
        json=entry_payload(PURCHASE_LINES, exercise_id=exercise_id),
        headers=auth_headers(student),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["entry_number"] == 1
    assert data["exercise_id"] == exercise_id
    assert [line["account_code"] for line in data["lines"]] == ["600", "472", "572"]
    assert data["lines"][0]["debit"] == "1000.00"
    assert data["lines"][2]["credit"] == "1210.00"


async def test_inert_lines_are_not_stored(client, classroom, db_session):
    lines = PURCHASE_LINES + [("700", "Ventas", "0", "0")]

    response = await client.post(
        "/v1/journal/entries",
        json=entry_payload(lines, exercise_id=classroom["exercise"].id),
        headers=auth_headers(classroom["student"]),
    )

    assert response.status_code == 201
    assert len(response.json()["lines"]) == 3
    assert await db_session.scalar(select(func.count(JournalLine.id))) == 3


async def test_blank_rows_are_dropped(client, classroom, db_session):
    lines = PURCHASE_LINES + [("", "", "0", "0")]

    response = await client.post(
        "/v1/journal/entries",
        json=entry_payload(lines, exercise_id=classroom["exercise"].id),
        headers=auth_headers(classroom["student"]),
    )

    assert response.status_code == 201
    assert [line["account_code"] for line in response.json()["lines"]] == ["600", "472", "572"]
    assert await db_session.scalar(select(func.count(JournalLine.id))) == 3


async def test_line_with_amount_needs_an_account(client, classroom):
    lines = [("", "", "100", "0"), ("572", "Bancos", "0", "100")]

    response = await client.post(
        "/v1/journal/entries",
        json=entry_payload(lines),
        headers=auth_headers(classroom["student"]),
    )

    assert response.status_code == 422


async def test_unbalanced_entry_is_rejected_and_not_stored(client, classroom, db_session):
    student = classroom["student"]
    headers = auth_headers(student)
    lines = [("430", "Clientes", "100", "0"), ("700", "Ventas", "0", "90")]

    response = await client.post("/v1/journal/entries", json=entry_payload(lines), headers=headers)

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_LEDGER_002"
    assert body["details"]["delta"] == "10.00"

    assert await db_session.scalar(select(func.count(JournalEntry.id))) == 0

    ledger = await client.get("/v1/journal/ledger", headers=headers)
    assert ledger.json() == []


async def test_single_line_entry_is_rejected(client, classroom):
    response = await client.post(
        "/v1/journal/entries",
        json=entry_payload([("430", "Clientes", "100", "0"), ("700", "Ventas", "", None)]),
        headers=auth_headers(classroom["student"]),
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_LEDGER_001"


async def test_negative_or_overprecise_amounts_fail_validation(client, classroom):
    headers = auth_headers(classroom["student"])

    negative = await client.post(
        "/v1/journal/entries",
        json=entry_payload([("572", "Bancos", "-10", "0"), ("100", "Capital", "0", "-10")]),
        headers=headers,
    )
    overprecise = await client.post(
        "/v1/journal/entries",
        json=entry_payload([("572", "Bancos", "10.001", "0"), ("100", "Capital", "0", "10.001")]),
        headers=headers,
    )

    assert negative.status_code == 422
    assert overprecise.status_code == 422
    assert negative.json()["error_code"] == "ERR_VALIDATION"


async def test_teacher_cannot_record_entries(client, classroom):
    response = await client.post(
        "/v1/journal/entries",
        json=entry_payload(PURCHASE_LINES),
        headers=auth_headers(classroom["teacher"]),
    )

    assert response.status_code == 403


async def test_unassigned_exercise_is_forbidden(client, classroom, db_session):
    from contaedu.app.models.exercise import Exercise

    other = Exercise(title="Otro", description="No asignado", teacher_id=classroom["teacher"].id)
    db_session.add(other)
    await db_session.commit()

    response = await client.post(
        "/v1/journal/entries",
        json=entry_payload(PURCHASE_LINES, exercise_id=other.id),
        headers=auth_headers(classroom["student"]),
    )

    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"


async def test_entry_numbers_are_sequential_per_exercise_scope(client, classroom):
    headers = auth_headers(classroom["student"])
    exercise_id = classroom["exercise"].id

    numbers = []
    for exercise in (exercise_id, exercise_id, None, exercise_id, None):
        response = await client.post(
            "/v1/journal/entries", json=entry_payload(PURCHASE_LINES, exercise_id=exercise), headers=headers
        )
        numbers.append(response.json()["entry_number"])

    assert numbers == [1, 2, 1, 3, 2]


async def test_entry_numbers_are_per_student(client, classroom):
    exercise_id = classroom["exercise"].id

    for student in (classroom["student"], classroom["classmate"]):
        response = await client.post(
            "/v1/journal/entries",
            json=entry_payload(PURCHASE_LINES, exercise_id=exercise_id),
            headers=auth_headers(student),
        )
        assert response.json()["entry_number"] == 1


async def test_deleted_numbers_are_not_reused(client, classroom):
    headers = auth_headers(classroom["student"])
    first = await client.post("/v1/journal/entries", json=entry_payload(PURCHASE_LINES), headers=headers)
    second = await client.post("/v1/journal/entries", json=entry_payload(PURCHASE_LINES), headers=headers)

    delete = await client.delete(f"/v1/journal/entries/{second.json()['id']}", headers=headers)
    third = await client.post("/v1/journal/entries", json=entry_payload(PURCHASE_LINES), headers=headers)

    assert first.json()["entry_number"] == 1
    assert delete.status_code == 204
    assert third.json()["entry_number"] == 3


async def test_delete_removes_lines(client, classroom, db_session):
    headers = auth_headers(classroom["student"])
    created = await client.post("/v1/journal/entries", json=entry_payload(PURCHASE_LINES), headers=headers)

    response = await client.delete(f"/v1/journal/entries/{created.json()['id']}", headers=headers)

    assert response.status_code == 204
    assert await db_session.scalar(select(func.count(JournalLine.id))) == 0
    listing = await client.get("/v1/journal/entries", headers=headers)
    assert listing.json() == []


async def test_cannot_delete_someone_elses_entry(client, classroom):
    created = await client.post(
        "/v1/journal/entries", json=entry_payload(PURCHASE_LINES), headers=auth_headers(classroom["student"])
    )

    response = await client.delete(
        f"/v1/journal/entries/{created.json()['id']}", headers=auth_headers(classroom["classmate"])
    )

    assert response.status_code == 404


async def test_entries_are_locked_after_submission(client, classroom):
    headers = auth_headers(classroom["student"])
    exercise_id = classroom["exercise"].id
    created = await client.post(
        "/v1/journal/entries", json=entry_payload(PURCHASE_LINES, exercise_id=exercise_id), headers=headers
    )

    submitted = await client.post(f"/v1/submissions/{exercise_id}/submit", headers=headers)
    assert submitted.status_code == 200

    delete = await client.delete(f"/v1/journal/entries/{created.json()['id']}", headers=headers)
    create = await client.post(
        "/v1/journal/entries", json=entry_payload(PURCHASE_LINES, exercise_id=exercise_id), headers=headers
    )

    assert delete.status_code == 409
    assert delete.json()["error_code"] == "ERR_LEDGER_004"
    assert create.status_code == 409

    # Entries outside the exercise are unaffected
    free = await client.post("/v1/journal/entries", json=entry_payload(PURCHASE_LINES), headers=headers)
    assert free.status_code == 201


async def test_ledger_and_trial_balance_views(client, classroom):
    headers = auth_headers(classroom["student"])
    exercise_id = classroom["exercise"].id

    await client.post(
        "/v1/journal/entries",
        json=entry_payload([
            ("600", "Compras", "2000.00", "0"),
            ("472", "IVA", "420.00", "0"),
            ("572", "Bancos", "0", "1210.00"),
            ("400", "Proveedores", "0", "1210.00"),
        ], exercise_id=exercise_id),
        headers=headers,
    )
    await client.post(
        "/v1/journal/entries",
        json=entry_payload([("572", "Bancos", "500", "0"), ("100", "Capital social", "0", "500")]),
        headers=headers,
    )

    ledger = (await client.get("/v1/journal/ledger", headers=headers)).json()
    assert [account["account_code"] for account in ledger] == ["100", "400", "472", "572", "600"]
    bank = ledger[3]
    assert len(bank["entries"]) == 2
    assert bank["total_debit"] == "500.00"
    assert bank["total_credit"] == "1210.00"
    assert bank["balance"] == "-710.00"

    scoped = (await client.get(
        "/v1/journal/trial-balance", params={"exercise_id": exercise_id}, headers=headers
    )).json()
    rows = {row["account_code"]: row for row in scoped["rows"]}
    assert "100" not in rows
    assert rows["572"]["credit_sum"] == "1210.00"
    assert rows["572"]["credit_balance"] == "1210.00"
    assert rows["572"]["debit_balance"] == "0.00"
    assert scoped["totals"] == {
        "debit_sum": "2420.00",
        "credit_sum": "2420.00",
        "debit_balance": "2420.00",
        "credit_balance": "2420.00",
    }


async def test_empty_trial_balance(client, classroom):
    response = await client.get("/v1/journal/trial-balance", headers=auth_headers(classroom["student"]))

    assert response.status_code == 200
    assert response.json() == {
        "rows": [],
        "totals": {"debit_sum": "0.00", "credit_sum": "0.00", "debit_balance": "0.00", "credit_balance": "0.00"},
    }


async def test_journal_requires_authentication(client):
    response = await client.get("/v1/journal/entries")

    assert response.status_code in (401, 403)
