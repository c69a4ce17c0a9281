from datetime import datetime, timedelta, timezone

API = "/api/v1/interviews"


def _create(client, headers, **body):
    payload = {"professionId": "backend-developer", "characterId": "joe", **body}
    return client.post(API, json=payload, headers=headers)


def test_requires_bearer_token(client):
    resp = client.get(API)
    assert resp.status_code == 401
    assert resp.json()["success"] is False
    assert resp.json()["code"] == "unauthorized"


def test_rejects_token_signed_with_other_secret(client, make_token):
    token = make_token("user-1", secret="not-the-secret")
    resp = client.get(API, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "invalid_token"


def test_rejects_malformed_subject(client, make_token):
    token = make_token("has spaces in it")
    resp = client.get(API, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_identifier"


def test_create_interview_fills_defaults(client, auth_headers):
    resp = _create(client, auth_headers(), overallScore=78)

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert data["userId"] == "user-1"
    assert data["status"] == "completed"
    assert data["overallScore"] == 78
    assert data["technicalScore"] == 0
    assert data["feedback"] == ""
    assert data["strengths"] == []
    assert data["improvements"] == []
    assert data["completedAt"] is not None
    assert data["successRate"] == 0


def test_create_derives_duration_from_started_at(client, auth_headers):
    started = datetime.now(timezone.utc) - timedelta(minutes=25, seconds=10)

    resp = _create(client, auth_headers(), startedAt=started.isoformat())

    assert resp.status_code == 201
    assert resp.json()["data"]["duration"] == 25


def test_create_accepts_legacy_weaknesses(client, auth_headers):
    resp = _create(client, auth_headers(), weaknesses=["slow answers"], strengths=["clear"])

    data = resp.json()["data"]
    assert data["improvements"] == ["slow answers"]
    assert "weaknesses" not in data


def test_improvements_win_over_weaknesses(client, auth_headers):
    resp = _create(client, auth_headers(), weaknesses=["old"], improvements=["new"])
    assert resp.json()["data"]["improvements"] == ["new"]


def test_create_rejects_out_of_range_score(client, auth_headers):
    resp = _create(client, auth_headers(), overallScore=101)

    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "validation_failure"


def test_create_rejects_long_feedback(client, auth_headers):
    resp = _create(client, auth_headers(), feedback="x" * 2001)
    assert resp.status_code == 422


def test_get_interview_ownership(client, auth_headers, add_attempt):
    mine = add_attempt(user_id="user-1")
    theirs = add_attempt(user_id="user-2")

    assert client.get(f"{API}/{mine.id}", headers=auth_headers()).status_code == 200
    assert client.get(f"{API}/{theirs.id}", headers=auth_headers()).status_code == 403
    assert client.get(f"{API}/99999", headers=auth_headers()).status_code == 404
    resp = client.get(f"{API}/not-a-number", headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_identifier"


def test_out_of_range_interview_id(client, auth_headers):
    resp = client.get(f"{API}/99999999999999999999999", headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json()["message"] == "invalid_interview_id"
    assert client.delete(f"{API}/{2**63}", headers=auth_headers()).status_code == 400


def test_list_interviews_paginates(client, auth_headers, add_attempt):
    for i in range(5):
        add_attempt(overall_score=60 + i)
    add_attempt(user_id="user-2")

    resp = client.get(API, params={"limit": 2, "page": 1}, headers=auth_headers())

    body = resp.json()
    assert body["total"] == 5
    assert body["count"] == 2
    assert body["pages"] == 3
    assert [item["overallScore"] for item in body["data"]] == [64, 63]


def test_list_interviews_filters(client, auth_headers, add_attempt):
    add_attempt(profession_id="nurse", status="cancelled")
    add_attempt(profession_id="nurse")
    add_attempt(profession_id="ux-designer")

    resp = client.get(API, params={"status": "completed", "professionId": "nurse"}, headers=auth_headers())

    assert resp.json()["total"] == 1
    assert client.get(API, params={"status": "weird"}, headers=auth_headers()).json()["total"] == 0


def test_update_interview(client, auth_headers, add_attempt):
    attempt = add_attempt(overall_score=50)

    resp = client.put(
        f"{API}/{attempt.id}",
        json={"overallScore": 65, "weaknesses": ["structure"], "feedback": "better"},
        headers=auth_headers(),
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["overallScore"] == 65
    assert data["improvements"] == ["structure"]
    assert data["feedback"] == "better"
    assert data["professionId"] == "backend-developer"


def test_update_validates_and_checks_owner(client, auth_headers, add_attempt):
    attempt = add_attempt(user_id="user-2")

    assert client.put(f"{API}/{attempt.id}", json={"overallScore": 5}, headers=auth_headers()).status_code == 403
    assert client.put(f"{API}/{attempt.id}", json={"overallScore": -1}, headers=auth_headers("user-2")).status_code == 422
    assert client.put(f"{API}/{attempt.id}", json={"status": "done"}, headers=auth_headers("user-2")).status_code == 422


def test_delete_interview(client, auth_headers, add_attempt):
    attempt = add_attempt()

    assert client.delete(f"{API}/{attempt.id}", headers=auth_headers("user-2")).status_code == 403
    resp = client.delete(f"{API}/{attempt.id}", headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json()["data"] == {}
    assert client.get(f"{API}/{attempt.id}", headers=auth_headers()).status_code == 404


def test_recent_interviews(client, auth_headers, add_attempt):
    for i in range(7):
        add_attempt(overall_score=i)
    add_attempt(status="in_progress", completed_at=None, overall_score=None)

    body = client.get(f"{API}/recent", headers=auth_headers()).json()

    assert body["count"] == 5
    assert [item["overallScore"] for item in body["data"]] == [6, 5, 4, 3, 2]
    assert set(body["data"][0]) == {
        "id",
        "professionId",
        "characterId",
        "overallScore",
        "createdAt",
        "duration",
    }


def test_stats_endpoint(client, auth_headers):
    headers = auth_headers()
    for score in (90, 85, 95):
        _create(client, headers, overallScore=score, technicalScore=80, characterId="victor")

    resp = client.get(f"{API}/stats", headers=headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["totalInterviews"] == 3
    assert data["averageScore"] == 90
    assert data["averageTechnicalScore"] == 80
    assert data["recentInterviews"] == 3
    assert data["bestScore"]["score"] == 95
    assert data["characterStats"] == [{"characterId": "victor", "count": 3, "averageScore": 90}]
    assert [p["overallScore"] for p in data["progressTrend"]] == [90, 85, 95]


def test_stats_for_new_user(client, auth_headers):
    data = client.get(f"{API}/stats", headers=auth_headers()).json()["data"]

    assert data["totalInterviews"] == 0
    assert data["bestScore"] is None
    assert data["detailedScores"] is None
    assert data["progressTrend"] == []
