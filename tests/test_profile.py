"""Tests for the profile endpoints and the restricted update schema."""

from conftest import fetch_user


class TestProfile:
    async def test_get_user(self, auth_client):
        resp = await auth_client.get("/api/user")
        assert resp.status_code == 200
        body = resp.json()
        assert body["email"] == "learner@example.com"
        assert body["firstName"] == "Asha"
        assert "passwordHash" not in body
        assert "failedLoginCount" not in body

    async def test_update_allowed_fields(self, auth_client):
        resp = await auth_client.put("/api/profile", json={
            "firstName": "New",
            "careerAspirations": "Data scientist",
            "learningPace": "fast",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["firstName"] == "New"
        assert body["lastName"] == "Rao"
        assert body["careerAspirations"] == "Data scientist"
        assert body["learningPace"] == "fast"

    async def test_security_fields_are_never_applied(self, auth_client, database):
        resp = await auth_client.put("/api/profile", json={
            "role": "policymaker",
            "firstName": "New",
            "surveyCompleted": True,
            "failedLoginCount": 0,
            "passwordHash": "x",
            "email": "hijack@example.com",
        })
        assert resp.status_code == 200
        assert resp.json()["firstName"] == "New"
        assert resp.json()["role"] == "learner"

        user = await fetch_user(database, "learner@example.com")
        assert user.first_name == "New"
        assert user.role == "learner"
        assert user.survey_completed is False
        assert user.password_hash != "x"

    async def test_invalid_learning_pace(self, auth_client):
        resp = await auth_client.put("/api/profile", json={"learningPace": "warp"})
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "learningPace"

    async def test_null_for_required_columns_is_rejected(self, auth_client, database):
        for field in ("learningPace", "preferredLanguage"):
            resp = await auth_client.put("/api/profile", json={field: None})
            assert resp.status_code == 400
            assert resp.json()["errors"][0]["field"] == field

        user = await fetch_user(database, "learner@example.com")
        assert user.learning_pace == "moderate"
        assert user.preferred_language == "en"

    async def test_null_clears_optional_fields(self, auth_client):
        await auth_client.put("/api/profile", json={"currentRole": "Intern"})
        resp = await auth_client.put("/api/profile", json={"currentRole": None})
        assert resp.status_code == 200
        assert resp.json()["currentRole"] is None

    async def test_requires_auth(self, client):
        assert (await client.put("/api/profile", json={"firstName": "X"})).status_code == 401
        assert (await client.get("/api/user")).status_code == 401
