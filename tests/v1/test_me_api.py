"""Tests for caller-scoped endpoints."""

from fastapi import status


def test_recent_communities_after_visits(client, other_auth_token, make_community) -> None:
    names = [f"visit{number}" for number in range(1, 7)]
    for name in names:
        community = make_community(name)
        assert client.get(f"/api/v1/communities/{community.id}", headers=other_auth_token).status_code == 200

    recent = client.get("/api/v1/me/recent-communities", headers=other_auth_token).json()
    assert len(recent) == 5
    assert {item["name"] for item in recent} <= set(names)


def test_recent_communities_requires_auth(client) -> None:
    response = client.get("/api/v1/me/recent-communities")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["kind"] == "AUTH_REQUIRED"


def test_memberships_listing(client, other_auth_token, community) -> None:
    client.put(f"/api/v1/communities/{community.id}/membership", json={"joined": True}, headers=other_auth_token)
    payload = client.get("/api/v1/me/memberships", headers=other_auth_token).json()
    assert payload["pagination"]["records"] == 1
    assert payload["data"][0]["community"]["id"] == community.id
