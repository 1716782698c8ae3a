"""Tests for song routes."""

from __future__ import annotations

from fastapi.testclient import TestClient


def test_bulk_add(client: TestClient) -> None:
    """Test bulk import reports added songs and the detected format."""
    response = client.post(
        "/api/songs/bulk",
        json={"data": "Sugaree, Grateful Dead\nDeal, Grateful Dead\n, Nobody"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["added"] == ['"Sugaree" by Grateful Dead', '"Deal" by Grateful Dead']
    assert data["errors"] == ["Line 3: Missing song title"]
    assert data["duplicates"] == []
    assert data["detected_format"] == "title-artist"


def test_bulk_add_reports_duplicates(seeded_client: TestClient) -> None:
    """Test re-importing a song is reported as a duplicate."""
    response = seeded_client.post("/api/songs/bulk", json={"data": "SUGAREE, Grateful Dead"})

    data = response.json()
    assert data["added"] == []
    assert len(data["duplicates"]) == 1


def test_bulk_add_requires_data(client: TestClient) -> None:
    """Test empty or missing data is rejected."""
    assert client.post("/api/songs/bulk", json={"data": ""}).status_code == 422
    assert client.post("/api/songs/bulk", json={}).status_code == 422


def test_list_songs(seeded_client: TestClient) -> None:
    """Test listing the catalog with and without a search."""
    response = seeded_client.get("/api/songs")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [s["title"] for s in data["songs"]] == [
        "Fly Me to the Moon",
        "Sugaree",
        "Tennessee Jed",
    ]
    moon = data["songs"][0]
    assert moon["artists"] == ["Frank Sinatra"]
    assert moon["key"] == "C"
    assert moon["duration_seconds"] == 148
    assert moon["bpm"] == 120

    searched = seeded_client.get("/api/songs", params={"search": "jed"}).json()
    assert [s["title"] for s in searched["songs"]] == ["Tennessee Jed"]

    limited = seeded_client.get("/api/songs", params={"limit": 2}).json()
    assert limited["total"] == 2


def test_list_songs_rejects_bad_limit(client: TestClient) -> None:
    """Test the limit must be positive."""
    assert client.get("/api/songs", params={"limit": 0}).status_code == 422


def test_match_exact(seeded_client: TestClient) -> None:
    """Test matching a known song and artist."""
    response = seeded_client.post(
        "/api/songs/match", json={"title": "Sugaree", "artist": "Grateful Dead"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["candidate"]["title"] == "sugaree"
    assert data["candidate"]["artist"] == "grateful dead"
    assert data["candidate"]["original_line"] == "Sugaree - Grateful Dead"
    assert data["candidate"]["confidence"] == "exact"

    result = data["result"]
    assert result["confidence"] == "exact"
    assert result["is_new_song"] is False
    assert result["best_match"]["song"]["title"] == "Sugaree"
    assert result["best_match"]["confidence"] == "exact"
    assert result["best_match"]["score"] == 1.0


def test_match_partial_without_artist(seeded_client: TestClient) -> None:
    """Test a partial title finds the containing song."""
    response = seeded_client.post("/api/songs/match", json={"title": "the moon"})

    result = response.json()["result"]
    assert result["confidence"] == "partial"
    assert result["best_match"]["song"]["title"] == "Fly Me to the Moon"


def test_match_new_song(seeded_client: TestClient) -> None:
    """Test an unknown song is reported as new."""
    response = seeded_client.post("/api/songs/match", json={"title": "Brand New Tune"})

    result = response.json()["result"]
    assert result["confidence"] == "new"
    assert result["is_new_song"] is True
    assert result["matches"] == []
    assert result["best_match"] is None


def test_match_requires_title(client: TestClient) -> None:
    """Test an empty title is rejected."""
    assert client.post("/api/songs/match", json={"title": ""}).status_code == 422
