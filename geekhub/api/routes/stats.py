from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status

from geekhub.api.deps import RequestContext, get_library_reader, get_request_context
from geekhub.models.media import StatsScope, StatsType
from geekhub.schema.stats import StatsSummary
from geekhub.services import stats_service
from geekhub.services.library_service import LibraryEntryReader

router = APIRouter()


def _current_year() -> int:
    return datetime.now(timezone.utc).year


@router.get("/summary", response_model=StatsSummary)
async def stats_summary(
    scope: StatsScope = Query(default=StatsScope.MINE),
    year: int | None = Query(default=None, ge=2000, le=2100),
    type: StatsType = Query(default=StatsType.ALL),
    context: RequestContext = Depends(get_request_context),
    reader: LibraryEntryReader = Depends(get_library_reader),
) -> StatsSummary:
    if not context.group_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No group context. Please select a group first.",
        )
    try:
        return await stats_service.summarize_library(
            reader,
            user_id=context.user_id,
            group_id=context.group_id,
            scope=scope,
            year=year if year is not None else _current_year(),
            type=type,
        )
    except stats_service.TooManyEntries as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
