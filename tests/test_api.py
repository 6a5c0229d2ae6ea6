import inspect
from datetime import timedelta

from fastapi.routing import APIRoute

from portal.core.auth import create_access_token, get_current_user
from portal.main import app
from portal.models import utcnow


class TestAuth:
    def test_protected_routes_need_a_token(self, client):
        for method, path in [
            ("get", "/api/auth/user"), ("get", "/api/applications"), ("get", "/api/stats"),
            ("post", "/api/documents"), ("put", "/api/tasks/1"), ("get", "/api/commissions"),
        ]:
            response = getattr(client, method)(path)
            assert response.status_code == 401
            assert response.json() == {"message": "Unauthorized"}

    def test_garbage_token_is_rejected(self, client):
        response = client.get("/api/auth/user", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_token_for_unknown_user_is_rejected(self, client):
        token = create_access_token({"sub": "12345"})
        response = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_register_then_login(self, client):
        response = client.post("/api/auth/register", json={
            "email": "maya@example.com", "password": "longpassword", "firstName": "Maya"
        })
        assert response.status_code == 201

        duplicate = client.post("/api/auth/register", json={
            "email": "maya@example.com", "password": "longpassword"
        })
        assert duplicate.status_code == 409

        bad = client.post("/api/auth/login", json={"email": "maya@example.com", "password": "wrongpassword"})
        assert bad.status_code == 401

        login = client.post("/api/auth/login", json={"email": "maya@example.com", "password": "longpassword"})
        assert login.status_code == 200
        body = login.json()
        assert body["role"] == "student"

        me = client.get("/api/auth/user", headers={"Authorization": f"Bearer {body['accessToken']}"})
        assert me.status_code == 200
        assert me.json()["firstName"] == "Maya"
        assert me.json()["profile"] is None

    def test_current_user_includes_role_profile(self, client, make_user):
        _, headers = make_user("student")
        client.post("/api/profiles/student", json={"nationality": "Kenya", "budgetMax": 20000}, headers=headers)
        profile = client.get("/api/auth/user", headers=headers).json()["profile"]
        assert profile["nationality"] == "Kenya"
        assert profile["budgetMax"] == 20000


class TestRoleSwitch:
    def test_both_endpoints_switch_role(self, client, make_user):
        _, headers = make_user("student")
        response = client.post("/api/auth/user/role", json={"role": "agent"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["role"] == "agent"

        response = client.post("/api/switch-role", json={"role": "university"}, headers=headers)
        assert response.json()["role"] == "university"
        assert client.get("/api/auth/user", headers=headers).json()["role"] == "university"

    def test_invalid_role(self, client, make_user):
        _, headers = make_user()
        response = client.post("/api/switch-role", json={"role": "superuser"}, headers=headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid role"

    def test_same_role_is_no_op(self, client, make_user):
        _, headers = make_user("agent")
        first = client.post("/api/switch-role", json={"role": "agent"}, headers=headers).json()
        second = client.post("/api/switch-role", json={"role": "agent"}, headers=headers).json()
        assert first["updatedAt"] == second["updatedAt"]


class TestProfiles:
    def test_create_twice_conflicts(self, client, make_user):
        _, headers = make_user("agent")
        assert client.post("/api/profiles/agent", json={"companyName": "Go Global"}, headers=headers).status_code == 201
        assert client.post("/api/profiles/agent", json={"companyName": "Again"}, headers=headers).status_code == 409

    def test_put_creates_profile_on_first_write(self, client, make_user):
        _, headers = make_user("student")
        response = client.put("/api/profiles/student", json={"gpa": 3.7}, headers=headers)
        assert response.status_code == 200
        assert response.json()["gpa"] == 3.7

        response = client.put("/api/profiles/student", json={"nationality": "Peru"}, headers=headers)
        assert response.json()["gpa"] == 3.7
        assert response.json()["nationality"] == "Peru"

    def test_university_first_write_needs_name_and_country(self, client, make_user):
        _, headers = make_user("university")
        assert client.put("/api/profiles/university", json={"city": "Lyon"}, headers=headers).status_code == 400
        response = client.put("/api/profiles/university", json={
            "universityName": "Lyon Institute", "country": "France"
        }, headers=headers)
        assert response.status_code == 200
        assert response.json()["isActive"] is True

    def test_malformed_body_is_a_validation_error(self, client, make_user):
        _, headers = make_user("student")
        response = client.post("/api/profiles/student", json={"gpa": "very high"}, headers=headers)
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid request"
        assert body["errors"]

    def test_null_list_field_is_rejected(self, client, make_user):
        _, headers = make_user("student")
        client.put("/api/profiles/student", json={"preferredCountries": ["Japan"]}, headers=headers)
        response = client.put("/api/profiles/student", json={"preferredCountries": None}, headers=headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request"

        profile = client.get("/api/auth/user", headers=headers).json()["profile"]
        assert profile["preferredCountries"] == ["Japan"]


class TestUniversities:
    def test_programs_and_search(self, client, make_user, make_university, make_program):
        _, headers = make_user("university")
        uni = make_university("Sydney Uni", "Australia")
        make_university("Melbourne Uni", "Australia")

        response = client.post(f"/api/universities/{uni.id}/programs", json={
            "programName": "Data Science MSc", "degree": "Master", "field": "Data Science", "tuitionFee": 42000
        }, headers=headers)
        assert response.status_code == 201
        assert response.json()["currency"] == "USD"

        assert len(client.get(f"/api/programs/{uni.id}").json()) == 1
        assert len(client.get(f"/api/universities/{uni.id}/programs").json()) == 1
        assert len(client.get("/api/universities").json()) == 2

        results = client.get("/api/universities/search", params={"field": "Law"}).json()
        assert len(results) == 2
        assert all(r["programs"] == [] for r in results)

        results = client.get("/api/universities/search", params={
            "country": "Australia", "budgetMin": 40000, "budgetMax": 45000
        }).json()
        by_name = {r["universityName"]: r for r in results}
        assert [p["programName"] for p in by_name["Sydney Uni"]["programs"]] == ["Data Science MSc"]

    def test_program_for_unknown_university(self, client, make_user):
        _, headers = make_user()
        response = client.post("/api/universities/999/programs", json={
            "programName": "Law LLB", "degree": "Bachelor", "field": "Law"
        }, headers=headers)
        assert response.status_code == 404
        assert response.json() == {"message": "University not found"}

    def test_bad_budget_is_rejected(self, client):
        assert client.get("/api/universities/search", params={"budgetMin": "cheap"}).status_code == 400


class TestApplications:
    def test_draft_then_submit_scenario(self, client, make_user, make_university, make_program):
        _, headers = make_user("student")
        program = make_program(make_university())

        created = client.post("/api/applications", json={
            "universityId": program.university_id, "programId": program.id
        }, headers=headers)
        assert created.status_code == 201
        application = created.json()
        assert application["status"] == "draft"

        before = client.get("/api/stats", headers=headers).json()
        updated = client.put(f"/api/applications/{application['id']}", json={"status": "submitted"}, headers=headers)
        assert updated.json()["status"] == "submitted"

        after = client.get("/api/stats", headers=headers).json()
        assert after["totalApplications"] == 1
        assert after["pendingReviews"] == before["pendingReviews"] == 0
        assert after["visaStatus"] == "In Progress"

    def test_status_changes_are_not_restricted(self, client, make_user, make_application):
        student, headers = make_user("student")
        application = make_application(student, status="enrolled")
        for status in ["draft", "visa_approved", "under_review"]:
            response = client.put(f"/api/applications/{application.id}", json={"status": status}, headers=headers)
            assert response.status_code == 200
            assert response.json()["status"] == status

    def test_unknown_status_is_rejected(self, client, make_user, make_application):
        student, headers = make_user()
        application = make_application(student)
        response = client.put(f"/api/applications/{application.id}", json={"status": "accepted"}, headers=headers)
        assert response.status_code == 400

    def test_null_for_required_field_is_rejected(self, client, make_user, make_application):
        student, headers = make_user()
        application = make_application(student, status="submitted")
        for field in ["status", "universityId", "programId"]:
            response = client.put(f"/api/applications/{application.id}", json={field: None}, headers=headers)
            assert response.status_code == 400, field
            assert response.json()["message"] == "Invalid request"

        unchanged = client.get(f"/api/applications/{application.id}", headers=headers).json()
        assert unchanged["status"] == "submitted"

    def test_references_are_checked(self, client, make_user, make_university, make_program):
        _, headers = make_user()
        uni = make_university()
        other_program = make_program(make_university("Elsewhere"))

        assert client.post("/api/applications", json={"universityId": uni.id, "programId": 999},
                           headers=headers).status_code == 404
        assert client.post("/api/applications", json={"universityId": uni.id, "programId": other_program.id},
                           headers=headers).status_code == 400

    def test_list_depends_on_role(self, client, storage, make_user, make_university, make_program, make_application):
        student, student_headers = make_user("student")
        agent, agent_headers = make_user("agent")
        uni_owner, uni_headers = make_user("university")
        uni = storage.create_university_profile({
            "user_id": uni_owner.id, "university_name": "Own Uni", "country": "Ireland"
        })
        program = make_program(uni)
        mine = make_application(student, agent=agent, program=program)
        make_application(student)

        student_view = client.get("/api/applications", headers=student_headers).json()
        assert len(student_view) == 2
        assert {a["university"]["universityName"] for a in student_view} == {"Own Uni", "Test University"}

        agent_view = client.get("/api/applications", headers=agent_headers).json()
        assert [a["id"] for a in agent_view] == [mine.id]
        assert agent_view[0]["student"]["id"] == student.id

        uni_view = client.get("/api/applications", headers=uni_headers).json()
        assert [a["id"] for a in uni_view] == [mine.id]
        assert uni_view[0]["program"]["id"] == program.id

        _, admin_headers = make_user("admin")
        assert client.get("/api/applications", headers=admin_headers).json() == []

    def test_get_single_and_missing(self, client, make_user, make_application):
        student, headers = make_user()
        application = make_application(student)
        response = client.get(f"/api/applications/{application.id}", headers=headers)
        assert response.json()["program"]["field"] == "Computer Science"

        missing = client.put("/api/applications/999", json={"notes": "x"}, headers=headers)
        assert missing.status_code == 404
        assert missing.json() == {"message": "Application not found"}


class TestDocuments:
    def test_new_document_is_unverified(self, client, make_user):
        _, headers = make_user()
        created = client.post("/api/documents", json={
            "documentType": "passport", "fileName": "passport.pdf", "fileUrl": "/uploads/passport.pdf"
        }, headers=headers)
        assert created.status_code == 201

        docs = client.get("/api/documents", headers=headers).json()
        assert len(docs) == 1
        assert docs[0]["isVerified"] is False
        assert docs[0]["fileName"] == "passport.pdf"

    def test_verify_document(self, client, make_user):
        reviewer, headers = make_user("university")
        doc = client.post("/api/documents", json={
            "documentType": "cv_resume", "fileName": "cv.pdf", "fileUrl": "/uploads/cv.pdf"
        }, headers=headers).json()

        verified = client.put(f"/api/documents/{doc['id']}", json={"isVerified": True}, headers=headers).json()
        assert verified["isVerified"] is True
        assert verified["verifiedBy"] == reviewer.id
        assert verified["verifiedAt"] is not None

    def test_unknown_document_type(self, client, make_user):
        _, headers = make_user()
        response = client.post("/api/documents", json={
            "documentType": "selfie", "fileName": "me.png", "fileUrl": "/uploads/me.png"
        }, headers=headers)
        assert response.status_code == 400

    def test_application_documents(self, client, make_user, make_application):
        student, headers = make_user()
        application = make_application(student)
        client.post("/api/documents", json={
            "documentType": "ielts_toefl", "fileName": "ielts.pdf", "fileUrl": "/u/ielts.pdf",
            "applicationId": application.id,
        }, headers=headers)
        docs = client.get(f"/api/applications/{application.id}/documents", headers=headers).json()
        assert [d["documentType"] for d in docs] == ["ielts_toefl"]


class TestTasks:
    def test_create_complete_and_list(self, client, make_user):
        _, headers = make_user()
        due = (utcnow() + timedelta(days=7)).isoformat()
        task = client.post("/api/tasks", json={"title": "Book IELTS", "dueDate": due, "priority": "high"},
                           headers=headers).json()
        assert task["isCompleted"] is False

        done = client.put(f"/api/tasks/{task['id']}", json={"isCompleted": True}, headers=headers).json()
        assert done["isCompleted"] is True
        assert done["completedAt"] is not None

        tasks = client.get("/api/tasks", headers=headers).json()
        assert [t["title"] for t in tasks] == ["Book IELTS"]

    def test_bad_priority(self, client, make_user):
        _, headers = make_user()
        assert client.post("/api/tasks", json={"title": "x", "priority": "urgent"}, headers=headers).status_code == 400

    def test_missing_task(self, client, make_user):
        _, headers = make_user()
        assert client.put("/api/tasks/999", json={"title": "x"}, headers=headers).status_code == 404

    def test_null_for_required_field_is_rejected(self, client, make_user):
        _, headers = make_user()
        task = client.post("/api/tasks", json={"title": "Book IELTS"}, headers=headers).json()
        for body in [{"title": None}, {"isCompleted": None}, {"priority": None}]:
            response = client.put(f"/api/tasks/{task['id']}", json=body, headers=headers)
            assert response.status_code == 400, body
            assert response.json() == {"message": "Invalid request", "errors": response.json()["errors"]}

        # dueDate and description are nullable and may still be cleared
        cleared = client.put(f"/api/tasks/{task['id']}", json={"description": None}, headers=headers)
        assert cleared.status_code == 200


class TestCommissionsAndStats:
    def test_agent_dashboard(self, client, make_user, make_application):
        student, _ = make_user()
        agent, headers = make_user("agent")
        won = make_application(student, agent=agent, status="offer_received")
        make_application(student, agent=agent, status="submitted")

        created = client.post("/api/commissions", json={"applicationId": won.id, "amount": 750}, headers=headers)
        assert created.status_code == 201
        assert created.json()["status"] == "pending"

        paid = client.put(f"/api/commissions/{created.json()['id']}", json={"status": "paid"}, headers=headers).json()
        assert paid["paidAt"] is not None

        assert [c["amount"] for c in client.get("/api/commissions", headers=headers).json()] == [750.0]

        stats = client.get("/api/stats", headers=headers).json()
        assert stats == {"activeLeads": 2, "successRate": 50, "monthlyCommission": 750.0, "ranking": 3}

    def test_university_without_profile_gets_empty_stats(self, client, make_user):
        _, headers = make_user("university")
        assert client.get("/api/stats", headers=headers).json() == {}

    def test_admin_stats_shape(self, client, make_user):
        _, headers = make_user("admin")
        stats = client.get("/api/stats", headers=headers).json()
        assert set(stats) == {"totalUsers", "universities", "activeApplications", "monthlyRevenue"}
        assert stats["totalUsers"] == 1


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_database_routes_run_in_threadpool():
    """Handlers and the auth dependency use blocking sessions, so none may be a coroutine."""

    routes = [r for r in app.routes if isinstance(r, APIRoute) and r.path.startswith("/api")]
    assert routes
    for route in routes:
        assert not inspect.iscoroutinefunction(route.endpoint), route.path
    assert not inspect.iscoroutinefunction(get_current_user)
