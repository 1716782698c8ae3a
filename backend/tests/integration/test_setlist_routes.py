"""Tests for setlist routes."""

from __future__ import annotations

from fastapi.testclient import TestClient

SETLIST = """
Set 1
1. Sugaree - Grateful Dead
2. Tennessee Jed
Set 2
Brand New Tune
"""


def test_parse_and_match(seeded_client: TestClient) -> None:
    """Test a setlist is split into sets and each song matched."""
    response = seeded_client.post("/api/setlists/parse", json={"text": SETLIST})

    assert response.status_code == 200
    assert "X-Trace-ID" in response.headers
    data = response.json()

    assert [s["name"] for s in data["sets"]] == ["Set 1", "Set 2"]
    assert data["complexity"] == "low"
    assert data["message"] is None
    assert data["total_lines"] == 5
    assert data["parsed_lines"] == 5

    sugaree, jed = data["sets"][0]["songs"]
    assert sugaree["title"] == "sugaree"
    assert sugaree["artist"] == "grateful dead"
    assert sugaree["confidence"] == "exact"
    assert sugaree["match"]["best_match"]["song"]["title"] == "Sugaree"

    # Catalog song has an artist, the line does not
    assert jed["confidence"] == "title-only"

    new_tune = data["sets"][1]["songs"][0]
    assert new_tune["confidence"] == "new"
    assert new_tune["match"]["is_new_song"] is True


def test_parse_without_matching(seeded_client: TestClient) -> None:
    """Test match=false only parses."""
    response = seeded_client.post("/api/setlists/parse", json={"text": SETLIST, "match": False})

    songs = [song for s in response.json()["sets"] for song in s["songs"]]
    assert len(songs) == 3
    assert all(song["match"] is None for song in songs)
    assert all(song["confidence"] == "unknown" for song in songs)


def test_parse_empty_text(client: TestClient) -> None:
    """Test empty text still returns one empty set."""
    response = client.post("/api/setlists/parse", json={"text": ""})

    assert response.status_code == 200
    data = response.json()
    assert data["sets"] == [{"name": "Set 1", "songs": []}]
    assert data["complexity"] == "low"


def test_parse_long_list_is_flagged(client: TestClient) -> None:
    """Test long lists get a complexity advisory but are still parsed."""
    text = "\n".join(f"Song {n}" for n in range(60))

    data = client.post("/api/setlists/parse", json={"text": text, "match": False}).json()

    assert data["complexity"] == "high"
    assert data["message"]
    assert len(data["sets"][0]["songs"]) == 60


def test_parse_requires_text(client: TestClient) -> None:
    """Test the text field is required."""
    assert client.post("/api/setlists/parse", json={}).status_code == 422
