# tests/services/test_content_lifecycle.py
"""Tests for posts, comments, nesting rules and cascading deletes."""

from datetime import timedelta

import pytest

from level_forum.core.errors import ConflictError, NotFoundError
from level_forum.db.time import utcnow
from level_forum.models import ContentType, Notification


async def test_create_post_bumps_topic_activity(services, alice, topic) -> None:
    before = (await services.topics.get_topic(topic.id)).last_activity_at
    await services.posts.create_post(topic.id, alice.id, "Second", "Body")
    after = (await services.topics.get_topic(topic.id)).last_activity_at
    assert after >= before


async def test_reply_nesting_is_one_level(services, alice, bob, post) -> None:
    root = await services.comments.create_comment(post.id, bob.id, "Root")
    reply = await services.comments.reply_to_comment(root.id, alice.id, "Reply")
    assert reply.parent_comment_id == root.id
    assert reply.post_id == post.id

    with pytest.raises(ConflictError):
        await services.comments.reply_to_comment(reply.id, bob.id, "Too deep")
    with pytest.raises(ConflictError):
        await services.comments.create_comment(post.id, bob.id, "Too deep", reply.id)


async def test_parent_must_belong_to_same_post(services, alice, topic, post) -> None:
    other = await services.posts.create_post(topic.id, alice.id, "Other", "Body")
    root = await services.comments.create_comment(other.id, alice.id, "Elsewhere")

    with pytest.raises(ConflictError):
        await services.comments.create_comment(post.id, alice.id, "Mismatch", root.id)


async def test_locked_topic_rejects_new_content(services, alice, bob, topic, post) -> None:
    root = await services.comments.create_comment(post.id, bob.id, "Before lock")
    await services.topics.lock_topic(topic.id)

    with pytest.raises(ConflictError):
        await services.posts.create_post(topic.id, alice.id, "Locked", "Body")
    with pytest.raises(ConflictError):
        await services.comments.create_comment(post.id, bob.id, "Locked")
    with pytest.raises(ConflictError):
        await services.comments.reply_to_comment(root.id, alice.id, "Locked")

    await services.topics.lock_topic(topic.id, locked=False)
    await services.comments.create_comment(post.id, bob.id, "Unlocked again")


async def test_deleting_post_removes_its_comments(services, alice, bob, post) -> None:
    root = await services.comments.create_comment(post.id, bob.id, "Root")
    reply = await services.comments.reply_to_comment(root.id, alice.id, "Reply")

    await services.posts.soft_delete_post(post.id)

    assert await services.posts.get_post(post.id) is None
    assert await services.comments.get_flat_comments_for_post(post.id) == []
    assert await services.comments.get_comment(reply.id) is None
    with pytest.raises(NotFoundError):
        await services.posts.soft_delete_post(post.id)
    with pytest.raises(NotFoundError):
        await services.comments.create_comment(post.id, bob.id, "Late")


async def test_deleting_comment_removes_only_its_replies(services, alice, bob, post) -> None:
    doomed = await services.comments.create_comment(post.id, bob.id, "Doomed")
    await services.comments.reply_to_comment(doomed.id, alice.id, "Doomed reply")
    sibling = await services.comments.create_comment(post.id, alice.id, "Sibling")

    await services.comments.soft_delete_comment(doomed.id)

    remaining = await services.comments.get_flat_comments_for_post(post.id)
    assert [c.id for c in remaining] == [sibling.id]
    assert await services.posts.get_post(post.id) is not None
    assert await services.comments.get_comment_children(doomed.id) == []


async def test_flat_comments_are_oldest_first(services, alice, bob, post) -> None:
    first = await services.comments.create_comment(post.id, bob.id, "One")
    second = await services.comments.create_comment(post.id, alice.id, "Two")
    reply = await services.comments.reply_to_comment(first.id, alice.id, "Three")

    comments = await services.comments.get_flat_comments_for_post(post.id)
    assert [c.id for c in comments] == [first.id, second.id, reply.id]
    assert comments[0].author_username == "bobby"

    page = await services.comments.get_flat_comments_for_post(post.id, take=1, skip=1)
    assert [c.id for c in page] == [second.id]


async def test_update_post_keeps_score_and_ignores_blank_title(services, bob, post) -> None:
    await services.votes.toggle_vote("Post", post.id, bob.id, 1)

    updated = await services.posts.update_post(post.id, title="   ", body="Edited")

    assert updated.title == "Hello"
    assert updated.body == "Edited"
    assert updated.score == 1
    assert updated.updated_at is not None


async def test_update_comment(services, bob, post) -> None:
    comment = await services.comments.create_comment(post.id, bob.id, "Tpyo")
    updated = await services.comments.update_comment(comment.id, "Typo")
    assert updated.body == "Typo"
    assert updated.updated_at is not None


async def test_query_posts_sorting_and_filters(services, alice, bob, topic, post) -> None:
    popular = await services.posts.create_post(topic.id, bob.id, "Popular hello", "Body")
    await services.votes.toggle_vote("Post", popular.id, alice.id, 1)

    newest = await services.posts.query_posts_by_topic(topic.id)
    assert [p.id for p in newest.items] == [popular.id, post.id]

    top = await services.posts.query_posts_by_topic(topic.id, sort="top")
    assert top.items[0].id == popular.id
    assert top.items[0].score == 1

    by_title = await services.posts.query_posts(title_query="popular")
    assert [p.id for p in by_title.items] == [popular.id]

    by_author = await services.posts.query_posts(author_id=alice.id)
    assert by_author.total == 1

    paged = await services.posts.query_posts(page=2, page_size=1)
    assert paged.total == 2
    assert len(paged.items) == 1


async def test_posts_of_deleted_topic_disappear(services, topic, post) -> None:
    await services.topics.soft_delete_topic(topic.id)
    assert (await services.posts.query_posts()).total == 0


async def test_comment_notifies_post_author(services, alice, bob, post) -> None:
    comment = await services.comments.create_comment(post.id, bob.id, "Great post")

    notes = await services.notifications.get_user_notifications(alice.id)
    assert len(notes) == 1
    assert notes[0].target_type is ContentType.POST
    assert notes[0].target_id == post.id
    assert notes[0].message == 'New comment on your post "Hello": Great post'

    await services.comments.reply_to_comment(comment.id, alice.id, "Thanks!")
    replies = await services.notifications.get_user_notifications(bob.id)
    assert len(replies) == 1
    assert replies[0].target_type is ContentType.COMMENT
    assert replies[0].target_id == comment.id
    assert replies[0].message == "New reply to your comment: Thanks!"


async def test_own_activity_does_not_notify(services, alice, post) -> None:
    root = await services.comments.create_comment(post.id, alice.id, "Self comment")
    await services.comments.reply_to_comment(root.id, alice.id, "Self reply")
    assert await services.notifications.get_user_notifications(alice.id) == []


async def test_notification_snippet_is_truncated(services, alice, bob, post) -> None:
    await services.comments.create_comment(post.id, bob.id, "x" * 150)
    [note] = await services.notifications.get_user_notifications(alice.id)
    assert note.message.endswith("x" * 100 + "…")


async def test_old_notifications_are_hidden(services, session_factory, alice, bob, post) -> None:
    async with session_factory() as db, db.begin():
        stale = Notification.for_post_comment(post.id, alice.id, "Hello", "Ancient")
        stale.created_at = utcnow() - timedelta(days=8)
        db.add(stale)
    await services.comments.create_comment(post.id, bob.id, "Fresh")

    notes = await services.notifications.get_user_notifications(alice.id)
    assert [n.message.rsplit(": ", 1)[1] for n in notes] == ["Fresh"]
