"""Tests for the AI advisory endpoints with a stubbed LLM."""

import pytest

from vidya.services.ai_service import AIProviderError, parse_json_response

SKILL_GAP = {
    "skillGaps": [
        {
            "skillName": "Machine Learning",
            "currentLevel": "none",
            "requiredLevel": "intermediate",
            "priority": "low",
            "recommendations": ["Take an ML course"],
        },
        {
            "skillName": "Data Analysis",
            "currentLevel": "beginner",
            "requiredLevel": "advanced",
            "priority": "high",
            "recommendations": ["Practice with pandas"],
        },
    ],
    "overallScore": 55,
    "strengths": ["Statistics"],
    "improvementAreas": ["Programming"],
    "careerReadiness": 48,
}

PATHWAY = {
    "title": "Road to Data Analyst",
    "description": "From spreadsheets to machine learning",
    "duration": "6 months",
    "difficulty": "beginner",
    "courses": [
        {"title": "Advanced Machine Learning", "provider": "AI Academy", "priority": 9},
        {"title": "Unlisted Bootcamp", "provider": "Somewhere", "priority": 15},
        {"title": "python for data analysis", "priority": 6},
        {"title": "Cloud Computing with AWS", "priority": 3},
        {"title": "Web Development Fundamentals", "priority": 8},
    ],
    "milestones": ["First dashboard"],
    "expectedOutcomes": ["Job ready"],
}


class TestParsing:
    def test_plain_json(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_fenced_json(self):
        assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            parse_json_response("[1, 2]")


class TestGate:
    async def test_survey_required(self, auth_client):
        resp = await auth_client.post("/api/ai/skill-analysis", json={"targetRole": "Data Analyst"})
        assert resp.status_code == 403
        assert resp.json()["detail"]["redirectTo"] == "/survey"

    async def test_auth_required(self, client):
        resp = await client.get("/api/ai/course-recommendations")
        assert resp.status_code == 401


class TestSkillAnalysis:
    async def test_analysis_is_returned_and_logged(self, surveyed_client, llm):
        llm.queue(SKILL_GAP)
        resp = await surveyed_client.post("/api/ai/skill-analysis", json={"targetRole": "Data Analyst"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["overallScore"] == 55
        assert body["skillGaps"][1]["skillName"] == "Data Analysis"
        assert "Data Analyst" in llm.prompts[-1]
        # Survey answers fill in the blank profile
        assert "B.Sc. Statistics" in llm.prompts[-1]

        logged = (await surveyed_client.get("/api/ai/analyses", params={"type": "skill_gap"})).json()
        assert len(logged) == 1
        assert logged[0]["confidence"] == 0.85
        assert logged[0]["input"]["targetRole"] == "Data Analyst"
        assert logged[0]["input"]["currentSkills"] == 0
        assert "prompt" not in logged[0]["input"]

    async def test_scores_are_clamped(self, surveyed_client, llm):
        llm.queue({**SKILL_GAP, "overallScore": 140, "careerReadiness": -5})
        body = (await surveyed_client.post(
            "/api/ai/skill-analysis", json={"targetRole": "Data Analyst"}
        )).json()
        assert body["overallScore"] == 100
        assert body["careerReadiness"] == 0

    async def test_provider_failure_is_generic_500(self, surveyed_client, llm):
        llm.error = AIProviderError("boom: secret upstream detail")
        resp = await surveyed_client.post("/api/ai/skill-analysis", json={"targetRole": "Data Analyst"})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "AI advisory service is temporarily unavailable"
        assert "secret" not in resp.text

    async def test_unparseable_output_is_not_fabricated(self, surveyed_client, llm):
        llm.queue("I cannot answer in JSON today")
        resp = await surveyed_client.post("/api/ai/skill-analysis", json={"targetRole": "Data Analyst"})
        assert resp.status_code == 500
        assert (await surveyed_client.get("/api/ai/analyses")).json() == []

    async def test_schema_mismatch(self, surveyed_client, llm):
        llm.queue({"skillGaps": [{"skillName": "X", "priority": "urgent"}]})
        resp = await surveyed_client.post("/api/ai/skill-analysis", json={"targetRole": "Data Analyst"})
        assert resp.status_code == 500

    async def test_missing_target_role(self, surveyed_client):
        resp = await surveyed_client.post("/api/ai/skill-analysis", json={})
        assert resp.status_code == 400


class TestGeneratePathway:
    async def test_pathway_is_ordered_and_saved(self, surveyed_client, llm):
        llm.queue(PATHWAY)
        resp = await surveyed_client.post("/api/ai/generate-pathway", json={
            "skillGapAnalysis": SKILL_GAP,
            "targetRole": "Data Analyst",
        })
        assert resp.status_code == 200
        body = resp.json()

        courses = body["pathway"]["courses"]
        assert [c["title"] for c in courses] == [
            "python for data analysis",
            "Web Development Fundamentals",
            "Cloud Computing with AWS",
            "Advanced Machine Learning",
            "Unlisted Bootcamp",
        ]
        assert [c["skillLevel"] for c in courses] == [
            "beginner", "intermediate", "intermediate", "advanced", None,
        ]
        assert courses[-1]["priority"] == 10
        assert courses[-1]["courseId"] is None
        assert courses[0]["provider"] == "DataCamp"

        saved = body["savedPathway"]
        assert saved["aiGenerated"] is True
        assert saved["targetRole"] == "Data Analyst"
        assert saved["courseIds"] == [c["courseId"] for c in courses[:4]]
        assert [p["id"] for p in (await surveyed_client.get("/api/pathways")).json()] == [saved["id"]]

    async def test_high_priority_gaps_lead_the_prompt(self, surveyed_client, llm):
        llm.queue(PATHWAY)
        await surveyed_client.post("/api/ai/generate-pathway", json={
            "skillGapAnalysis": SKILL_GAP,
            "targetRole": "Data Analyst",
        })
        prompt = llm.prompts[-1]
        assert prompt.index("Data Analysis (beginner") < prompt.index("Machine Learning (none")

    async def test_logged_with_redacted_input(self, surveyed_client, llm):
        llm.queue(PATHWAY)
        await surveyed_client.post("/api/ai/generate-pathway", json={
            "skillGapAnalysis": SKILL_GAP,
            "targetRole": "Data Analyst",
        })
        logged = (await surveyed_client.get(
            "/api/ai/analyses", params={"type": "pathway_recommendation"}
        )).json()
        assert logged[0]["confidence"] == 0.9
        assert logged[0]["input"]["skillGapAnalysis"]["skillGapsCount"] == 2
        assert logged[0]["input"]["availableCoursesCount"] == 6

    async def test_failure_saves_nothing(self, surveyed_client, llm):
        llm.error = AIProviderError("down")
        resp = await surveyed_client.post("/api/ai/generate-pathway", json={
            "skillGapAnalysis": SKILL_GAP,
            "targetRole": "Data Analyst",
        })
        assert resp.status_code == 500
        assert (await surveyed_client.get("/api/pathways")).json() == []


class TestCourseRecommendations:
    async def test_ranked_by_model(self, surveyed_client, llm):
        courses = {c["title"]: c["id"] for c in (await surveyed_client.get("/api/courses")).json()}
        llm.queue({"recommendedCourseIds": [
            courses["Cybersecurity Fundamentals"],
            "not-a-course",
            courses["Python for Data Analysis"],
        ]})
        resp = await surveyed_client.get("/api/ai/course-recommendations")
        assert resp.status_code == 200
        assert [c["title"] for c in resp.json()] == [
            "Cybersecurity Fundamentals",
            "Python for Data Analysis",
        ]

    async def test_limit(self, surveyed_client, llm):
        ids = [c["id"] for c in (await surveyed_client.get("/api/courses")).json()]
        llm.queue({"recommendedCourseIds": ids})
        resp = await surveyed_client.get("/api/ai/course-recommendations", params={"limit": 2})
        assert len(resp.json()) == 2

    async def test_falls_back_to_aspiration_match(self, surveyed_client, llm):
        llm.error = AIProviderError("timeout")
        resp = await surveyed_client.get("/api/ai/course-recommendations")
        assert resp.status_code == 200
        assert [c["title"] for c in resp.json()] == ["Python for Data Analysis"]

    async def test_fallback_on_garbage_output(self, surveyed_client, llm):
        llm.queue({"reasoning": "no ids"})
        resp = await surveyed_client.get("/api/ai/course-recommendations", params={"limit": 5})
        assert resp.status_code == 200
        assert [c["title"] for c in resp.json()] == ["Python for Data Analysis"]

    async def test_fallback_with_unmatched_aspiration_is_empty(self, surveyed_client, llm):
        await surveyed_client.put("/api/profile", json={"careerAspirations": "astronaut"})
        llm.error = AIProviderError("down")
        resp = await surveyed_client.get("/api/ai/course-recommendations", params={"limit": 3})
        assert resp.json() == []


class TestCareerGuidance:
    async def test_guidance(self, surveyed_client, llm):
        llm.queue({
            "careerAdvice": ["Build a portfolio"],
            "industryInsights": ["Analytics is growing"],
            "nextSteps": ["Finish the pandas course"],
            "salaryExpectations": "4-10 LPA",
            "jobMarketOutlook": "Strong",
        })
        resp = await surveyed_client.post("/api/ai/career-guidance")
        assert resp.status_code == 200
        assert resp.json()["salaryExpectations"] == "4-10 LPA"
        assert "Python Programming in Information Technology" in llm.prompts[-1]

        logged = (await surveyed_client.get("/api/ai/analyses", params={"type": "career_guidance"})).json()
        assert logged[0]["confidence"] == 0.88
        assert logged[0]["input"]["industryTrendsCount"] == 6
        assert logged[0]["input"]["userProgress"]["completedCourses"] == 0

    async def test_guidance_failure(self, surveyed_client, llm):
        llm.error = AIProviderError("down")
        resp = await surveyed_client.post("/api/ai/career-guidance")
        assert resp.status_code == 500
