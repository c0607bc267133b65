"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from conftest import NOW, days_ago, hours_ago

from storyline.server import create_app


@pytest.fixture
def client():
    return TestClient(create_app(clock=lambda: NOW))


def test_health(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_normalize_timeline_reports_drops(client):
    response = client.post(
        "/timeline/normalize",
        json={"timeline": [{"event": "Vote", "significance": "2"}, {"type": "image"}]},
    )
    assert response.status_code == 200
    body = response.json()
    assert [block["title"] for block in body["blocks"]] == ["Vote"]
    assert body["blocks"][0]["significance"] == 2
    assert body["dropped"] == [{"path": "timeline[1]", "reason": "image without url"}]


def test_normalize_analysis(client):
    response = client.post("/analysis/normalize", json={"analysis": {"futureQuestions": [{"q": 1}]}})
    assert response.json()["analysis"]["future"] == [{"q": 1}]
    assert client.post("/analysis/normalize", json={"analysis": "x"}).json() == {"analysis": None}


def test_headlines(client):
    response = client.post(
        "/headlines",
        json={"timeline": [{"title": "A", "date": "2024-01-01"}, {"title": "B", "date": "2024-02-01"}], "limit": 1},
    )
    assert response.json() == [{"id": "B-0-1", "title": "B", "dateLabel": "01/02/2024"}]


def test_rank(client):
    items = [
        {"id": "old", "category": "World", "createdAt": days_ago(4)},
        {"id": "new", "category": "World", "createdAt": hours_ago(1)},
        {"id": "sport", "category": "Sport", "createdAt": hours_ago(1)},
    ]
    response = client.post("/rank", json={"items": items, "category": "World"})
    assert response.status_code == 200
    body = response.json()
    assert [entry["id"] for entry in body] == ["new", "old"]
    assert body[0]["score"] == pytest.approx(0.4)


def test_rank_rejects_unknown_mode(client):
    response = client.post("/rank", json={"items": [], "mode": "random"})
    assert response.status_code == 422


def test_suggestions(client):
    response = client.post(
        "/suggestions",
        json={
            "base": {"id": "a", "category": "World"},
            "pool": [{"id": "a"}, {"id": "b", "category": "World"}, {"id": "c", "category": "Sport"}],
            "limit": 1,
        },
    )
    assert [entry["id"] for entry in response.json()] == ["b"]


def test_search(client):
    stories = [{"id": "1", "title": "Budget vote"}, {"id": "2", "title": "Other"}]
    assert client.post("/search", json={"stories": stories, "query": "budget"}).json() == [stories[0]]
    assert client.post("/search", json={"stories": stories, "query": "  "}).status_code == 422
