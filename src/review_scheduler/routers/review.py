from fastapi import APIRouter, HTTPException

from ..config import settings
from ..due import count_due, select_due_items
from ..logging import logger
from ..models.common import CollectionStats, SessionStats
from ..models.review import (
    CollectionStatsRequest,
    DueItemsRequest,
    DueItemsResponse,
    NextReviewRequest,
    NextReviewResponse,
    SessionSummaryRequest,
)
from ..policy import AccuracyAdjustment
from ..scheduler import compute_next_review
from ..session import describe_next_review, summarize_collection, summarize_session

router = APIRouter(tags=["review"])


@router.post("/next", response_model=NextReviewResponse, summary="採点して次回復習時刻を計算")
async def review_next(req: NextReviewRequest) -> NextReviewResponse:
    """Grade one item and return the outcome together with the new state.

    InvalidQuality / InvalidState はアプリ側の例外ハンドラで 422 に変換される。
    """
    try:
        outcome = compute_next_review(req.state, req.quality, req.now, strategy=req.strategy)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=exc.args[0]) from exc
    logger.info(
        "review_computed",
        item_id=outcome.item_id,
        quality=outcome.quality,
        interval=outcome.interval,
        repetitions=outcome.repetitions,
        strategy=outcome.strategy,
    )
    return NextReviewResponse(
        outcome=outcome,
        state=outcome.state,
        display_ease=outcome.display_ease,
        next_review=describe_next_review(outcome.next_review_date, req.now),
    )


@router.post("/due", response_model=DueItemsResponse, summary="出題対象を期限順に抽出")
async def review_due(req: DueItemsRequest) -> DueItemsResponse:
    """Return due items, most overdue first.

    - limit 未指定時は MAX_DUE_ITEMS（未設定なら上限なし）
    - due_count は上限適用前の件数
    """
    adjustment = AccuracyAdjustment.from_settings() if req.adjust_for_accuracy else None
    limit = req.limit if req.limit is not None else settings.max_due_items
    items = select_due_items(
        req.states,
        req.now,
        limit=limit,
        adjustment=adjustment,
        accuracy_by_item=req.accuracy_by_item,
    )
    due_count = count_due(
        req.states,
        req.now,
        adjustment=adjustment,
        accuracy_by_item=req.accuracy_by_item,
    )
    logger.info(
        "due_items_selected",
        candidates=len(req.states),
        due_count=due_count,
        returned=len(items),
        adjusted=adjustment is not None,
    )
    return DueItemsResponse(items=items, due_count=due_count)


@router.post("/summary", response_model=SessionStats, summary="セッション集計")
async def review_summary(req: SessionSummaryRequest) -> SessionStats:
    stats = summarize_session(req.outcomes)
    logger.info(
        "session_summarized",
        total_cards=stats.total_cards,
        accuracy=stats.accuracy,
    )
    return stats


@router.post("/collection", response_model=CollectionStats, summary="学習項目全体の統計")
async def review_collection(req: CollectionStatsRequest) -> CollectionStats:
    """Snapshot statistics (due / overdue / mastered) over the posted states."""
    return summarize_collection(req.states, req.now)
