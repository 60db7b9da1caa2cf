# src/level_forum/api/v1/endpoints/moderation.py
"""Report and moderation endpoints for the Level Forum API."""

from fastapi import APIRouter, Query, status

from level_forum.api.v1.dependencies import ActorDep, ModeratorDep, ServicesDep
from level_forum.core.errors import NotFoundError
from level_forum.schemas.common import Page
from level_forum.schemas.report import (
    ReportCreate,
    ReportDecision,
    ReportRead,
    ReportTargetInfo,
)

router = APIRouter(prefix="/reports", tags=["moderation"])


@router.post("/", response_model=ReportRead, status_code=status.HTTP_201_CREATED)
async def create_report(report: ReportCreate, actor: ActorDep, services: ServicesDep) -> ReportRead:
    """Report a post or comment."""
    return await services.reports.create_report(
        actor.user_id, report.target_type, report.target_id, report.reason
    )


@router.get("/", response_model=Page[ReportRead])
async def list_reports(
    moderator: ModeratorDep,
    services: ServicesDep,
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=100),
) -> Page[ReportRead]:
    """Moderation queue, newest first."""
    return await services.reports.query_reports(status_filter, search, page, page_size)


@router.get("/{report_id}", response_model=ReportRead)
async def get_report(report_id: int, moderator: ModeratorDep, services: ServicesDep) -> ReportRead:
    report = await services.reports.get_report(report_id)
    if report is None:
        raise NotFoundError("Report not found.")
    return report


@router.get("/{report_id}/target", response_model=ReportTargetInfo)
async def get_report_target(
    report_id: int,
    moderator: ModeratorDep,
    services: ServicesDep,
) -> ReportTargetInfo:
    """Where the reported item lives, for linking from the queue."""
    info = await services.reports.get_report_target_info(report_id)
    if info is None:
        raise NotFoundError("Report target not found.")
    return info


@router.post("/{report_id}/review", response_model=ReportRead)
async def review_report(
    report_id: int,
    decision: ReportDecision,
    moderator: ModeratorDep,
    services: ServicesDep,
) -> ReportRead:
    """Acknowledge a report; it stays open."""
    return await services.reports.review_report(report_id, moderator.user_id, decision.note)


@router.post("/{report_id}/close", response_model=ReportRead)
async def close_report(
    report_id: int,
    decision: ReportDecision,
    moderator: ModeratorDep,
    services: ServicesDep,
) -> ReportRead:
    return await services.reports.close_report(report_id, moderator.user_id, decision.note)


@router.post("/{report_id}/delete-target")
async def delete_report_target(
    report_id: int,
    moderator: ModeratorDep,
    services: ServicesDep,
) -> dict[str, int | str]:
    """Remove the reported item and close every open report on it."""
    closed = await services.reports.delete_report_target(report_id, moderator.user_id)
    return {"status": "target_removed", "reports_closed": closed}
