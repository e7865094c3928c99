"""
Integration tests for exercise hand-in and review.
"""

from contaedu.tests.factories import auth_headers


async def submit(client, student, exercise_id):
    return await client.post(f"/v1/submissions/{exercise_id}/submit", headers=auth_headers(student))


async def test_submit_and_review(client, classroom):
    student, teacher = classroom["student"], classroom["teacher"]
    exercise_id = classroom["exercise"].id

    submitted = await submit(client, student, exercise_id)
    assert submitted.status_code == 200
    assert submitted.json()["status"] == "SUBMITTED"
    assert submitted.json()["submitted_at"] is not None

    counts = await client.get("/v1/submissions/pending-counts", headers=auth_headers(teacher))
    assert counts.json() == {str(exercise_id): 1}

    review = await client.post(
        f"/v1/submissions/{submitted.json()['id']}/review",
        json={"feedback": "Bien, revisa el IVA", "grade": "8.5"},
        headers=auth_headers(teacher),
    )
    assert review.status_code == 200
    assert review.json()["status"] == "REVIEWED"
    assert review.json()["reviewed_by"] == teacher.id

    counts = await client.get("/v1/submissions/pending-counts", headers=auth_headers(teacher))
    assert counts.json() == {}

    mine = await client.get("/v1/submissions", headers=auth_headers(student))
    assert [s["status"] for s in mine.json()] == ["REVIEWED"]


async def test_cannot_submit_twice(client, classroom):
    exercise_id = classroom["exercise"].id
    await submit(client, classroom["student"], exercise_id)

    response = await submit(client, classroom["student"], exercise_id)

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_STATE_001"
    assert response.json()["details"]["current_status"] == "SUBMITTED"


async def test_review_requires_feedback_and_valid_grade(client, classroom):
    submitted = await submit(client, classroom["student"], classroom["exercise"].id)
    url = f"/v1/submissions/{submitted.json()['id']}/review"
    headers = auth_headers(classroom["teacher"])

    no_feedback = await client.post(url, json={"feedback": "", "grade": "5"}, headers=headers)
    bad_grade = await client.post(url, json={"feedback": "Ok", "grade": "11"}, headers=headers)

    assert no_feedback.status_code == 422
    assert bad_grade.status_code == 422


async def test_teacher_sees_submissions_with_student_names(client, classroom):
    exercise_id = classroom["exercise"].id
    await submit(client, classroom["student"], exercise_id)
    await submit(client, classroom["classmate"], exercise_id)

    response = await client.get(
        f"/v1/submissions/exercise/{exercise_id}", headers=auth_headers(classroom["teacher"])
    )

    assert sorted(s["student_username"] for s in response.json()) == ["alopez", "jperez"]


async def test_student_only_sees_own_submission(client, classroom):
    exercise_id = classroom["exercise"].id
    await submit(client, classroom["classmate"], exercise_id)

    response = await client.get(
        f"/v1/submissions/exercise/{exercise_id}", headers=auth_headers(classroom["student"])
    )

    assert response.json() == []


async def test_submitting_unassigned_exercise_is_forbidden(client, classroom):
    response = await submit(client, classroom["student"], 9999)

    assert response.status_code == 404
