from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.core.security import require_api_key
from app.history import db as history_db
from app.schemas.requests import HistoryRecord, HistoryStats

router = APIRouter(dependencies=[Depends(require_api_key)])


def _unavailable(exc: history_db.PersistenceFailure) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"History store unavailable: {exc}")


@router.get("/history", response_model=list[HistoryRecord])
@rate_limit()
def history(
    request: Request,
    user_id: str = Query(min_length=1, max_length=200),
    limit: int = Query(default=20, ge=1, le=100),
):
    _ = request
    try:
        rows = history_db.list_analyses(user_id, limit=min(limit, settings.history_page_size_max))
    except history_db.PersistenceFailure as exc:
        raise _unavailable(exc) from exc
    return [HistoryRecord(**row) for row in rows]


@router.get("/history/stats", response_model=HistoryStats)
@rate_limit()
def history_stats(request: Request, user_id: str = Query(min_length=1, max_length=200)):
    _ = request
    try:
        stats = history_db.get_user_stats(user_id)
    except history_db.PersistenceFailure as exc:
        raise _unavailable(exc) from exc
    return HistoryStats(**stats)
