# tests/v1/test_posts.py
"""Tests for post and comment endpoints."""

from fastapi import status


async def test_create_and_list_posts(client, auth_headers, alice, topic) -> None:
    response = await client.post(
        f"/api/v1/topics/{topic.id}/posts",
        json={"title": "Welcome", "body": "Say hi"},
        headers=auth_headers(alice),
    )
    assert response.status_code == status.HTTP_201_CREATED
    created = response.json()
    assert (created["title"], created["score"], created["author_id"]) == ("Welcome", 0, alice.id)

    listing = await client.get(f"/api/v1/topics/{topic.id}/posts", params={"sort": "top"})
    assert listing.json()["total"] == 1
    assert listing.json()["items"][0]["id"] == created["id"]


async def test_create_post_in_locked_topic(client, auth_headers, services, alice, topic) -> None:
    await services.topics.lock_topic(topic.id)
    response = await client.post(
        f"/api/v1/topics/{topic.id}/posts",
        json={"title": "Late", "body": ""},
        headers=auth_headers(alice),
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"detail": "Topic is locked."}


async def test_only_author_or_moderator_can_edit(
    client, auth_headers, alice, bob, moderator, post
) -> None:
    denied = await client.patch(
        f"/api/v1/posts/{post.id}", json={"body": "Hijacked"}, headers=auth_headers(bob)
    )
    assert denied.status_code == status.HTTP_403_FORBIDDEN

    own = await client.patch(
        f"/api/v1/posts/{post.id}", json={"body": "Edited"}, headers=auth_headers(alice)
    )
    assert own.json()["body"] == "Edited"

    moderated = await client.patch(
        f"/api/v1/posts/{post.id}", json={"title": "Renamed"}, headers=auth_headers(moderator)
    )
    assert moderated.json()["title"] == "Renamed"


async def test_delete_post_hides_comments(client, auth_headers, services, alice, bob, post) -> None:
    await services.comments.create_comment(post.id, bob.id, "A comment")

    response = await client.delete(f"/api/v1/posts/{post.id}", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert (await client.get(f"/api/v1/posts/{post.id}")).status_code == 404
    comments = await client.get(f"/api/v1/posts/{post.id}/comments")
    assert comments.json() == []


async def test_post_shows_viewer_vote(client, auth_headers, services, bob, post) -> None:
    await services.votes.toggle_vote("Post", post.id, bob.id, -1)

    as_bob = await client.get(f"/api/v1/posts/{post.id}", headers=auth_headers(bob))
    anonymous = await client.get(f"/api/v1/posts/{post.id}")

    assert (as_bob.json()["score"], as_bob.json()["my_vote"]) == (-1, -1)
    assert anonymous.json()["my_vote"] == 0


async def test_comment_thread(client, auth_headers, alice, bob, post) -> None:
    root = await client.post(
        f"/api/v1/posts/{post.id}/comments", json={"body": "Root"}, headers=auth_headers(bob)
    )
    assert root.status_code == status.HTTP_201_CREATED
    root_id = root.json()["id"]

    reply = await client.post(
        f"/api/v1/comments/{root_id}/replies", json={"body": "Reply"}, headers=auth_headers(alice)
    )
    assert reply.json()["parent_comment_id"] == root_id

    too_deep = await client.post(
        f"/api/v1/comments/{reply.json()['id']}/replies",
        json={"body": "Nope"},
        headers=auth_headers(bob),
    )
    assert too_deep.status_code == status.HTTP_409_CONFLICT

    children = await client.get(f"/api/v1/comments/{root_id}/children")
    assert [c["body"] for c in children.json()] == ["Reply"]

    thread = await client.get(f"/api/v1/posts/{post.id}/comments")
    assert [c["body"] for c in thread.json()] == ["Root", "Reply"]


async def test_delete_comment_permissions(client, auth_headers, services, alice, bob, post) -> None:
    comment = await services.comments.create_comment(post.id, bob.id, "Mine")

    denied = await client.delete(f"/api/v1/comments/{comment.id}", headers=auth_headers(alice))
    assert denied.status_code == status.HTTP_403_FORBIDDEN

    edited = await client.patch(
        f"/api/v1/comments/{comment.id}", json={"body": "Still mine"}, headers=auth_headers(bob)
    )
    assert edited.json()["body"] == "Still mine"

    deleted = await client.delete(f"/api/v1/comments/{comment.id}", headers=auth_headers(bob))
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
