"""
API tests for the match engine router, with the database dependency
pointed at in-memory SQLite.
"""

from datetime import date, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import AS_OF
from db import get_db
from match_engine.logic.constants import ENGINE_VERSION
from match_engine.models import Listing, Skill, User, UserSkill
from match_engine.routes import router

NOW = AS_OF.replace(tzinfo=None)


@pytest.fixture
def client(db_session):
    db_session.add_all([
        User(id="stu-1", role="student", institution="Holy Cross", weekly_hours=10),
        User(id="corp-1", role="corporate", company_name="Acme"),
        Skill(id=1, name="Python"),
    ])
    db_session.flush()
    db_session.add_all([
        UserSkill(user_id="stu-1", skill_id=1),
        Listing(id="lst-1", author_id="corp-1", title="Scraper", category="Data",
                skills_required=["python"], status="published",
                published_at=NOW - timedelta(days=1), start_date=date(2025, 6, 10)),
        Listing(id="lst-2", author_id="corp-1", title="Design system", category="Design",
                skills_required=["figma"], status="published",
                published_at=NOW - timedelta(days=4)),
    ])
    db_session.commit()

    def override_get_db():
        yield db_session

    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def test_recommendations_for_student(client):
    response = client.post(
        "/match-engine/recommendations",
        json={"subject_id": "stu-1", "subject_type": "student", "limit": 10},
    )
    assert response.status_code == 200

    data = response.json()
    assert data["subjectId"] == "stu-1"
    assert data["subjectType"] == "student"
    assert data["scoringProfile"] == "match_engine"
    assert data["total"] == 2
    assert data["partial"] is False
    assert data["engineVersion"] == ENGINE_VERSION
    assert [r["candidateId"] for r in data["recommendations"]] == ["lst-1", "lst-2"]

    top = data["recommendations"][0]
    assert top["matchedSkills"] == ["python"]
    assert len(top["breakdown"]) == 6
    assert "aiExplanation" not in data


def test_recommendations_pagination(client):
    response = client.post(
        "/match-engine/recommendations",
        json={"subject_id": "stu-1", "limit": 1, "offset": 1},
    )
    data = response.json()
    assert data["total"] == 2
    assert [r["candidateId"] for r in data["recommendations"]] == ["lst-2"]


@pytest.mark.parametrize("body", [
    {"subject_id": "stu-1", "limit": -1},
    {"subject_id": "stu-1", "limit": 10, "offset": -3},
    {"subject_id": "stu-1", "subject_type": "company"},
    {"subject_id": "stu-1", "profile": "vibes"},
])
def test_invalid_requests_return_400(client, body):
    response = client.post("/match-engine/recommendations", json=body)
    assert response.status_code == 400


def test_unknown_subject_returns_404(client):
    response = client.post("/match-engine/recommendations", json={"subject_id": "ghost"})
    assert response.status_code == 404


def test_listing_attractiveness(client):
    response = client.get("/match-engine/listings/lst-1/attractiveness")
    assert response.status_code == 200
    data = response.json()
    assert data["listingId"] == "lst-1"
    assert 0 <= data["attractivenessScore"] <= 100

    assert client.get("/match-engine/listings/nope/attractiveness").status_code == 404


def test_config(client):
    data = client.get("/match-engine/config").json()

    assert data["defaultProfile"] == "match_engine"
    assert set(data["profiles"]) == {"match_engine", "skill_overlap"}
    weights = [entry["weight"] for entry in data["profiles"]["match_engine"]]
    assert sum(weights) == pytest.approx(1.0)


def test_health(client):
    assert client.get("/match-engine/health").json() == {
        "status": "ok",
        "engine": "match-engine",
        "version": ENGINE_VERSION,
    }
