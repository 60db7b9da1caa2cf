# tests/services/test_reports.py
"""Tests for the report workflow and target removal."""

import pytest

from level_forum.core.errors import InvalidInputError, NotFoundError
from level_forum.models import ContentType, ReportStatus
from level_forum.services.report_service import target_removed_note


@pytest.fixture()
async def comment(services, bob, post):
    return await services.comments.create_comment(post.id, bob.id, "Offensive remark")


async def test_create_report(services, alice, comment) -> None:
    report = await services.reports.create_report(alice.id, "Comment", comment.id, "Rude")

    assert report.status is ReportStatus.OPEN
    assert report.target_type is ContentType.COMMENT
    assert report.reviewed_by_id is None
    assert (await services.reports.get_report(report.id)).reason == "Rude"


async def test_create_report_validation(services, alice, post) -> None:
    with pytest.raises(InvalidInputError):
        await services.reports.create_report(alice.id, "Topic", post.id, "Nope")
    with pytest.raises(NotFoundError):
        await services.reports.create_report(alice.id, "Post", 9999, "Missing")
    with pytest.raises(NotFoundError):
        await services.reports.create_report(9999, "Post", post.id, "Ghost reporter")


async def test_delete_target_closes_every_open_report(
    services, make_user, moderator, post, comment
) -> None:
    reports = []
    for reason in ("Rude", "Spam", "Off-topic"):
        reporter = await make_user()
        reports.append(
            await services.reports.create_report(reporter.id, "Comment", comment.id, reason)
        )
    unrelated = await services.reports.create_report(
        (await make_user()).id, "Post", post.id, "Unrelated"
    )

    closed = await services.reports.delete_report_target(reports[1].id, moderator.id)

    assert closed == 3
    assert await services.comments.get_comment(comment.id) is None
    for report in reports:
        stored = await services.reports.get_report(report.id)
        assert stored.status is ReportStatus.CLOSED
        assert stored.reviewed_by_id == moderator.id
        assert stored.review_note == target_removed_note(reports[1].id)
        assert stored.reviewed_at is not None
    assert (await services.reports.get_report(unrelated.id)).status is ReportStatus.OPEN
    assert await services.posts.get_post(post.id) is not None

    # Nothing left to close on a second pass.
    assert await services.reports.delete_report_target(reports[1].id, moderator.id) == 0


async def test_delete_post_target_cascades(services, alice, moderator, post, comment) -> None:
    report = await services.reports.create_report(alice.id, "Post", post.id, "Bad post")

    assert await services.reports.delete_report_target(report.id, moderator.id) == 1
    assert await services.posts.get_post(post.id) is None
    assert await services.comments.get_comment(comment.id) is None


async def test_delete_target_of_missing_report(services, moderator) -> None:
    with pytest.raises(NotFoundError):
        await services.reports.delete_report_target(9999, moderator.id)


async def test_review_keeps_report_open(services, alice, moderator, comment) -> None:
    report = await services.reports.create_report(alice.id, "Comment", comment.id, "Rude")

    closed = await services.reports.close_report(report.id, moderator.id, "Handled")
    assert closed.status is ReportStatus.CLOSED
    assert closed.review_note == "Handled"

    reviewed = await services.reports.review_report(report.id, moderator.id, "Second look")
    assert reviewed.status is ReportStatus.OPEN
    assert reviewed.reviewed_by_id == moderator.id
    assert reviewed.review_note == "Second look"


async def test_query_reports_filters(services, alice, moderator, post, comment) -> None:
    spam = await services.reports.create_report(alice.id, "Post", post.id, "Spam link")
    rude = await services.reports.create_report(alice.id, "Comment", comment.id, "Rude words")
    await services.reports.close_report(spam.id, moderator.id)

    everything = await services.reports.query_reports()
    assert [r.id for r in everything.items] == [rude.id, spam.id]
    assert (await services.reports.query_reports("All")).total == 2
    assert (await services.reports.query_reports("bogus")).total == 2

    open_only = await services.reports.query_reports("Open")
    assert [r.id for r in open_only.items] == [rude.id]
    closed_only = await services.reports.query_reports(ReportStatus.CLOSED)
    assert [r.id for r in closed_only.items] == [spam.id]

    searched = await services.reports.query_reports(search="SPAM")
    assert [r.id for r in searched.items] == [spam.id]

    paged = await services.reports.query_reports(page=2, page_size=1)
    assert paged.total == 2
    assert [r.id for r in paged.items] == [spam.id]


async def test_target_info_for_post(services, alice, topic) -> None:
    long_post = await services.posts.create_post(topic.id, alice.id, "Long", "y" * 400)
    report = await services.reports.create_report(alice.id, "Post", long_post.id, "Too long")

    info = await services.reports.get_report_target_info(report.id)

    assert info.post_id == long_post.id
    assert info.topic_id == topic.id
    assert info.snippet == "y" * 320 + "…"


async def test_target_info_for_comment(services, alice, topic, post, comment) -> None:
    report = await services.reports.create_report(alice.id, "Comment", comment.id, "Rude")

    info = await services.reports.get_report_target_info(report.id)
    assert (info.post_id, info.topic_id, info.snippet) == (post.id, topic.id, "Offensive remark")

    await services.comments.soft_delete_comment(comment.id)
    assert await services.reports.get_report_target_info(report.id) is None
    assert await services.reports.get_report_target_info(9999) is None


async def test_post_without_body_uses_title(services, alice, topic) -> None:
    bare = await services.posts.create_post(topic.id, alice.id, "Just a title", "")
    report = await services.reports.create_report(alice.id, "Post", bare.id, "Empty")
    info = await services.reports.get_report_target_info(report.id)
    assert info.snippet == "Just a title"
