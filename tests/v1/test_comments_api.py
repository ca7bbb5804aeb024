"""Tests for comment endpoints."""

from fastapi import status


def test_get_comment_with_vote(client, auth_token, test_comment) -> None:
    client.put(f"/api/v1/comments/{test_comment.id}/vote", json={"state": "DOWNVOTE"}, headers=auth_token)
    detail = client.get(f"/api/v1/comments/{test_comment.id}", headers=auth_token).json()
    assert detail["score"] == -1
    assert detail["my_vote"] == "DOWNVOTE"

    cleared = client.delete(f"/api/v1/comments/{test_comment.id}/vote", headers=auth_token)
    assert cleared.json()["score"] == 0


def test_replies_and_scope(client, auth_token, test_post, test_comment) -> None:
    reply = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Replying here", "parent_comment_id": test_comment.id},
        headers=auth_token,
    )
    assert reply.status_code == status.HTTP_201_CREATED

    replies = client.get(f"/api/v1/comments/{test_comment.id}/replies").json()
    assert [item["id"] for item in replies["data"]] == [reply.json()["id"]]

    top_level = client.get("/api/v1/comments", params={"post_id": test_post.id, "scope": "top_level"}).json()
    assert [item["id"] for item in top_level["data"]] == [test_comment.id]


def test_comment_search(client, test_post, other_user, make_comment) -> None:
    make_comment(test_post, other_user, content="Totally unrelated")
    hit = make_comment(test_post, other_user, content="Bananas are great")

    found = client.get("/api/v1/comments", params={"q": "banana"}).json()
    assert [item["id"] for item in found["data"]] == [hit.id]

    short = client.get("/api/v1/comments", params={"q": "b"})
    assert short.status_code == status.HTTP_400_BAD_REQUEST


def test_comment_edit_history_and_delete(client, other_auth_token, auth_token, test_comment) -> None:
    edited = client.put(
        f"/api/v1/comments/{test_comment.id}",
        json={"content": "Changed my mind"},
        headers=other_auth_token,
    )
    assert edited.json()["content"] == "Changed my mind"

    history = client.get(f"/api/v1/comments/{test_comment.id}/history").json()
    assert [item["content"] for item in history["data"]] == ["Nice post"]
    snapshot_id = history["data"][0]["id"]
    assert client.get(f"/api/v1/comments/{test_comment.id}/history/{snapshot_id}").status_code == 200
    assert client.get(f"/api/v1/comments/{test_comment.id}/history/{'0' * 32}").status_code == 404

    denied = client.delete(f"/api/v1/comments/{test_comment.id}", headers=auth_token)
    assert denied.status_code == status.HTTP_403_FORBIDDEN
    removed = client.delete(f"/api/v1/comments/{test_comment.id}", headers=other_auth_token)
    assert removed.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/comments/{test_comment.id}").status_code == status.HTTP_404_NOT_FOUND
