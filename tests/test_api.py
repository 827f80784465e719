"""HTTP API tests: auth, ownership, validation and the dashboard read models."""
from datetime import timedelta

from study_dashboard.core.clock import today, utcnow


async def create_subject(ac, name="Biology", color="#4285F4"):
    resp = await ac.post("/api/subjects", json={"name": name, "color": color})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_topic(ac, subject_id, name="Mitosis"):
    resp = await ac.post("/api/topics", json={"subjectId": subject_id, "name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_session(ac, subject_id, day="2099-01-10", start="09:00:00", end="11:00:00", duration=2):
    resp = await ac.post("/api/sessions", json={
        "subjectId": subject_id,
        "topic": "Cell structure",
        "date": day,
        "startTime": f"{day}T{start}",
        "endTime": f"{day}T{end}",
        "duration": duration,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_exam(ac, subject_id, date="2099-06-01", title="Finals"):
    resp = await ac.post("/api/exams", json={"subjectId": subject_id, "title": title, "date": date})
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestHealth:
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestAuth:
    async def test_protected_routes_require_login(self, client):
        for path in ("/api/subjects", "/api/sessions", "/api/exams", "/api/progress", "/api/stats"):
            resp = await client.get(path)
            assert resp.status_code == 401, path
            assert resp.json()["message"] == "Authentication required"

    async def test_register_logs_in(self, auth_client):
        resp = await auth_client.get("/api/user")
        assert resp.status_code == 200
        body = resp.json()
        assert body["username"] == "student"
        assert body["email"] == "student@example.com"
        assert "createdAt" in body
        assert "hashedPassword" not in body

    async def test_register_duplicate_email(self, auth_client):
        resp = await auth_client.post("/api/register", json={
            "email": "Student@Example.com",
            "username": "someone",
            "password": "secret123",
        })
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "email"

    async def test_register_short_password(self, client):
        resp = await client.post("/api/register", json={
            "email": "new@example.com",
            "username": "newbie",
            "password": "123",
        })
        assert resp.status_code == 400
        body = resp.json()
        assert body["message"] == "Validation failed"
        assert body["errors"][0]["field"] == "password"

    async def test_login_wrong_password(self, auth_client):
        resp = await auth_client.post("/api/login", json={
            "email": "student@example.com",
            "password": "wrong-password",
        })
        assert resp.status_code == 401
        assert resp.json()["message"] == "Incorrect email or password"

    async def test_logout_then_login(self, auth_client):
        resp = await auth_client.post("/api/logout")
        assert resp.status_code == 200
        assert (await auth_client.get("/api/user")).status_code == 401

        resp = await auth_client.post("/api/login", json={
            "email": "student@example.com",
            "password": "secret123",
        })
        assert resp.status_code == 200
        assert (await auth_client.get("/api/user")).json()["username"] == "student"


class TestSubjects:
    async def test_create_and_list(self, auth_client):
        created = await create_subject(auth_client)
        assert created["name"] == "Biology"
        assert created["color"] == "#4285F4"

        resp = await auth_client.get("/api/subjects")
        assert [s["id"] for s in resp.json()] == [created["id"]]

    async def test_duplicate_name_conflicts(self, auth_client):
        await create_subject(auth_client)
        resp = await auth_client.post("/api/subjects", json={"name": "Biology", "color": "#000000"})
        assert resp.status_code == 409
        body = resp.json()
        assert body["error"] == "duplicate"
        assert body["field"] == "name"
        assert "already exists" in body["message"]

    async def test_same_name_for_another_user(self, auth_client, other_client):
        await create_subject(auth_client)
        resp = await other_client.post("/api/subjects", json={"name": "Biology", "color": "#4285F4"})
        assert resp.status_code == 201

    async def test_invalid_color(self, auth_client):
        resp = await auth_client.post("/api/subjects", json={"name": "Biology", "color": "blue"})
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "color"

    async def test_other_users_subject_is_not_found(self, auth_client, other_client):
        subject = await create_subject(auth_client)
        for method in ("get", "delete"):
            resp = await getattr(other_client, method)(f"/api/subjects/{subject['id']}")
            assert resp.status_code == 404
            assert resp.json()["message"] == "Subject not found"

    async def test_update(self, auth_client):
        subject = await create_subject(auth_client)
        resp = await auth_client.patch(f"/api/subjects/{subject['id']}", json={"name": "Cell Biology"})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Cell Biology"
        assert resp.json()["color"] == "#4285F4"

    async def test_rename_to_taken_name(self, auth_client):
        await create_subject(auth_client, "Biology")
        chem = await create_subject(auth_client, "Chemistry")
        resp = await auth_client.patch(f"/api/subjects/{chem['id']}", json={"name": "Biology"})
        assert resp.status_code == 409
        assert resp.json()["field"] == "name"
        resp = await auth_client.get(f"/api/subjects/{chem['id']}")
        assert resp.json()["name"] == "Chemistry"

    async def test_delete_cascades(self, auth_client):
        subject = await create_subject(auth_client)
        topic = await create_topic(auth_client, subject["id"])
        session = await create_session(auth_client, subject["id"])
        exam = await create_exam(auth_client, subject["id"])
        await auth_client.post(f"/api/sessions/{session['id']}/topics", json={"topicId": topic["id"]})
        await auth_client.post(f"/api/exams/{exam['id']}/topics", json={"topicId": topic["id"]})

        resp = await auth_client.delete(f"/api/subjects/{subject['id']}")
        assert resp.status_code == 200
        assert resp.json()["id"] == subject["id"]

        assert (await auth_client.get("/api/sessions/all")).json() == []
        assert (await auth_client.get("/api/exams")).json() == []
        assert (await auth_client.get(f"/api/subjects/{subject['id']}")).status_code == 404

    async def test_subject_topics(self, auth_client):
        subject = await create_subject(auth_client)
        await create_topic(auth_client, subject["id"], "Meiosis")
        await create_topic(auth_client, subject["id"], "Enzymes")
        resp = await auth_client.get(f"/api/subjects/{subject['id']}/topics")
        assert [t["name"] for t in resp.json()] == ["Enzymes", "Meiosis"]


class TestTopics:
    async def test_create_needs_owned_subject(self, auth_client, other_client):
        subject = await create_subject(other_client)
        resp = await auth_client.post("/api/topics", json={"subjectId": subject["id"], "name": "Mitosis"})
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "subjectId"

    async def test_complete_counts_in_stats(self, auth_client):
        subject = await create_subject(auth_client)
        topic = await create_topic(auth_client, subject["id"])
        assert topic["isCompleted"] is False

        resp = await auth_client.post(f"/api/topics/{topic['id']}/complete")
        assert resp.status_code == 200
        assert resp.json()["isCompleted"] is True
        await auth_client.post(f"/api/topics/{topic['id']}/complete")

        stats = (await auth_client.get("/api/stats")).json()
        assert stats["topicsCompleted"] == 1

    async def test_delete(self, auth_client):
        subject = await create_subject(auth_client)
        topic = await create_topic(auth_client, subject["id"])
        resp = await auth_client.delete(f"/api/topics/{topic['id']}")
        assert resp.status_code == 200
        assert (await auth_client.delete(f"/api/topics/{topic['id']}")).status_code == 404


class TestSessions:
    async def test_create_accepts_duration(self, auth_client):
        subject = await create_subject(auth_client)
        session = await create_session(auth_client, subject["id"], duration=1.5)
        assert session["durationHours"] == 1.5
        assert session["subject"]["name"] == "Biology"
        assert session["completedAt"] is None

    async def test_end_before_start(self, auth_client):
        subject = await create_subject(auth_client)
        resp = await auth_client.post("/api/sessions", json={
            "subjectId": subject["id"],
            "topic": "Cells",
            "date": "2099-01-10",
            "startTime": "2099-01-10T11:00:00",
            "endTime": "2099-01-10T09:00:00",
            "duration": 2,
        })
        assert resp.status_code == 400

    async def test_unknown_subject(self, auth_client):
        resp = await auth_client.post("/api/sessions", json={
            "subjectId": 999,
            "topic": "Cells",
            "date": "2099-01-10",
            "startTime": "2099-01-10T09:00:00",
            "endTime": "2099-01-10T11:00:00",
            "duration": 2,
        })
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "subjectId"

    async def test_filter_by_subject(self, auth_client):
        bio = await create_subject(auth_client, "Biology")
        chem = await create_subject(auth_client, "Chemistry")
        await create_session(auth_client, bio["id"])
        await create_session(auth_client, chem["id"])

        resp = await auth_client.get("/api/sessions", params={"subject": chem["id"]})
        assert [s["subjectId"] for s in resp.json()] == [chem["id"]]
        resp = await auth_client.get("/api/sessions", params={"subject": "all"})
        assert len(resp.json()) == 2
        resp = await auth_client.get("/api/sessions", params={"subject": "chemistry"})
        assert resp.status_code == 400

    async def test_filter_by_status(self, auth_client):
        subject = await create_subject(auth_client)
        first = await create_session(auth_client, subject["id"], day="2099-01-10")
        await create_session(auth_client, subject["id"], day="2099-01-11")
        await auth_client.post(f"/api/sessions/{first['id']}/complete")

        resp = await auth_client.get("/api/sessions", params={"status": "completed"})
        assert [s["id"] for s in resp.json()] == [first["id"]]
        resp = await auth_client.get("/api/sessions", params={"status": "upcoming"})
        assert [s["status"] for s in resp.json()] == ["upcoming"]
        resp = await auth_client.get("/api/sessions", params={"status": "paused"})
        assert resp.status_code == 400

    async def test_listing_is_newest_first(self, auth_client):
        subject = await create_subject(auth_client)
        older = await create_session(auth_client, subject["id"], day="2099-01-10")
        newer = await create_session(auth_client, subject["id"], day="2099-02-10")
        resp = await auth_client.get("/api/sessions/all")
        assert [s["id"] for s in resp.json()] == [newer["id"], older["id"]]

    async def test_complete_updates_stats_once(self, auth_client):
        subject = await create_subject(auth_client)
        session = await create_session(auth_client, subject["id"], duration=2)

        resp = await auth_client.post(f"/api/sessions/{session['id']}/complete")
        assert resp.status_code == 200
        assert resp.json()["completedAt"] is not None
        await auth_client.post(f"/api/sessions/{session['id']}/complete")

        stats = (await auth_client.get("/api/stats")).json()
        assert stats["totalStudyTime"] == "2h 0m"
        assert stats["sessionsCompleted"] == 1
        assert stats["avgSessionLength"] == "2h 0m"

    async def test_complete_other_users_session(self, auth_client, other_client):
        subject = await create_subject(auth_client)
        session = await create_session(auth_client, subject["id"])
        resp = await other_client.post(f"/api/sessions/{session['id']}/complete")
        assert resp.status_code == 404
        stats = (await auth_client.get("/api/stats")).json()
        assert stats["sessionsCompleted"] == 0

    async def test_start_returns_session(self, auth_client):
        subject = await create_subject(auth_client)
        session = await create_session(auth_client, subject["id"])
        resp = await auth_client.post(f"/api/sessions/{session['id']}/start")
        assert resp.status_code == 200
        assert resp.json()["id"] == session["id"]
        assert resp.json()["completedAt"] is None

    async def test_today_with_topic_counts(self, auth_client):
        subject = await create_subject(auth_client)
        topic = await create_topic(auth_client, subject["id"])
        now = utcnow()
        resp = await auth_client.post("/api/sessions", json={
            "subjectId": subject["id"],
            "topic": "Revision",
            "date": today().isoformat(),
            "startTime": (now - timedelta(hours=1)).isoformat(),
            "endTime": (now + timedelta(hours=1)).isoformat(),
            "duration": 2,
        })
        session = resp.json()
        await create_session(auth_client, subject["id"], day="2099-01-10")
        link = (await auth_client.post(
            f"/api/sessions/{session['id']}/topics", json={"topicId": topic["id"]}
        )).json()

        [entry] = (await auth_client.get("/api/sessions/today")).json()
        assert entry["id"] == session["id"]
        assert entry["status"] == "ongoing"
        assert entry["totalTopicsCount"] == 1
        assert entry["completedTopicsCount"] == 0

        resp = await auth_client.post(f"/api/sessions/{session['id']}/topics/{link['id']}/complete")
        assert resp.status_code == 200
        assert resp.json()["isCompleted"] is True

        [entry] = (await auth_client.get("/api/sessions/today")).json()
        assert entry["completedTopicsCount"] == 1

    async def test_complete_link_from_other_session(self, auth_client):
        subject = await create_subject(auth_client)
        topic = await create_topic(auth_client, subject["id"])
        first = await create_session(auth_client, subject["id"], day="2099-01-10")
        second = await create_session(auth_client, subject["id"], day="2099-01-11")
        link = (await auth_client.post(
            f"/api/sessions/{first['id']}/topics", json={"topicId": topic["id"]}
        )).json()
        resp = await auth_client.post(f"/api/sessions/{second['id']}/topics/{link['id']}/complete")
        assert resp.status_code == 404

    async def test_detail_and_delete(self, auth_client):
        subject = await create_subject(auth_client)
        topic = await create_topic(auth_client, subject["id"])
        session = await create_session(auth_client, subject["id"])
        await auth_client.post(f"/api/sessions/{session['id']}/topics", json={"topicId": topic["id"]})

        detail = (await auth_client.get(f"/api/sessions/{session['id']}")).json()
        assert [link["topic"]["name"] for link in detail["sessionTopics"]] == ["Mitosis"]

        resp = await auth_client.delete(f"/api/sessions/{session['id']}")
        assert resp.status_code == 200
        assert resp.json()["message"] == "Session deleted successfully"
        assert (await auth_client.get(f"/api/sessions/{session['id']}")).status_code == 404


class TestExams:
    async def test_invalid_date(self, auth_client):
        subject = await create_subject(auth_client)
        resp = await auth_client.post("/api/exams", json={
            "subjectId": subject["id"],
            "title": "Finals",
            "date": "next tuesday",
        })
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "date"

    async def test_date_only_is_midnight(self, auth_client):
        subject = await create_subject(auth_client)
        exam = await create_exam(auth_client, subject["id"], date="2099-06-01")
        assert exam["date"] == "2099-06-01T00:00:00"

    async def test_progress_from_subject_topics(self, auth_client):
        subject = await create_subject(auth_client)
        topics = [await create_topic(auth_client, subject["id"], f"Topic {i}") for i in range(5)]
        for topic in topics[:2]:
            await auth_client.post(f"/api/topics/{topic['id']}/complete")
        await create_exam(auth_client, subject["id"])

        [exam] = (await auth_client.get("/api/exams")).json()
        assert exam["progress"] == 40

        progress = (await auth_client.get("/api/progress")).json()
        assert progress["subjects"][0]["progress"] == 40
        assert progress["totalProgress"] == {"completedTopics": 2, "totalTopics": 5, "percentage": 40}

    async def test_upcoming_skips_past(self, auth_client):
        subject = await create_subject(auth_client)
        await create_exam(auth_client, subject["id"], date="2000-01-01", title="Mocks")
        later = await create_exam(auth_client, subject["id"], date="2099-06-01")
        resp = await auth_client.get("/api/exams/upcoming")
        assert [e["id"] for e in resp.json()] == [later["id"]]

    async def test_detail_link_and_delete(self, auth_client):
        subject = await create_subject(auth_client)
        topic = await create_topic(auth_client, subject["id"])
        exam = await create_exam(auth_client, subject["id"])
        resp = await auth_client.post(f"/api/exams/{exam['id']}/topics", json={"topicId": topic["id"]})
        assert resp.status_code == 201

        detail = (await auth_client.get(f"/api/exams/{exam['id']}")).json()
        assert [link["topic"]["name"] for link in detail["examTopics"]] == ["Mitosis"]
        assert detail["progress"] == 0

        assert (await auth_client.delete(f"/api/exams/{exam['id']}")).status_code == 200
        assert (await auth_client.get(f"/api/exams/{exam['id']}")).status_code == 404

    async def test_detail_progress_from_subject(self, auth_client):
        subject = await create_subject(auth_client)
        done = await create_topic(auth_client, subject["id"], "Mitosis")
        await create_topic(auth_client, subject["id"], "Meiosis")
        await auth_client.post(f"/api/topics/{done['id']}/complete")
        exam = await create_exam(auth_client, subject["id"])

        detail = (await auth_client.get(f"/api/exams/{exam['id']}")).json()
        assert detail["progress"] == 50
        assert detail["examTopics"] == []


class TestStats:
    async def test_fresh_user(self, auth_client):
        stats = (await auth_client.get("/api/stats")).json()
        assert stats["totalStudyTime"] == "0h 0m"
        assert stats["topicsCompleted"] == 0
        assert stats["studyTimeChange"] == 0

    async def test_weekly(self, auth_client):
        subject = await create_subject(auth_client)
        await create_session(auth_client, subject["id"], day=today().isoformat(), duration=1.5)

        weeks = (await auth_client.get("/api/stats/weekly")).json()["weeklyData"]
        assert [w["weekIndex"] for w in weeks] == [3, 2, 1, 0]
        assert weeks[-1]["subjectHours"] == {"Biology": 1.5}
        assert weeks[0]["subjectHours"] == {}
