import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from cardwise.application.config import AppConfig, resolve_config
from cardwise.consts import VERSION
from cardwise.domain.errors import CardNotFoundError, DeckFormatError, InvalidQualityError

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cardwise.server")

INTERNAL_ERROR = "Internal server error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"cardwise server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("cardwise server shutting down...")


app = FastAPI(
    title="cardwise server",
    description="Review scheduling API for generated flashcards.",
    version=VERSION,
    lifespan=lifespan,
)


def get_config() -> AppConfig:
    return resolve_config()


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


class CardResponse(BaseModel):
    id: str
    note_id: str | None
    card_type: str
    question: str
    answer: str
    ease_factor: float
    interval: int
    repetitions: int
    next_review: datetime


# Quality is left untyped so booleans, strings and floats reach validate_quality (400, not 422)
class ReviewRequest(BaseModel):
    card_id: str
    quality: Any
    time_taken: int | None = Field(default=None, ge=0)
    user_id: str | None = None


class ReviewResponse(BaseModel):
    success: bool
    next_review: datetime
    ease_factor: float
    interval: int
    repetitions: int


@app.post("/cards/review", response_model=ReviewResponse)
async def record_review(req: ReviewRequest, config: AppConfig = Depends(get_config)):
    """
    Record a review and return the card's new schedule.
    """
    from cardwise.application.factory import get_card_repository, get_review_service

    user_id = req.user_id or config.user_id
    try:
        with get_card_repository(config) as repo:
            service = get_review_service(config, repo)
            outcome = await service.record_review(
                user_id,
                req.card_id,
                req.quality,
                time_taken=req.time_taken,
            )
    except InvalidQualityError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except CardNotFoundError as e:
        raise HTTPException(status_code=404, detail="Card not found") from e
    except Exception as e:
        logger.error(f"Review failed for {req.card_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e

    card = outcome.card
    return ReviewResponse(
        success=True,
        next_review=card.next_review,
        ease_factor=card.ease_factor,
        interval=card.interval,
        repetitions=card.repetitions,
    )


class DueResponse(BaseModel):
    total_due: int
    note_id: str | None
    cards: list[CardResponse]


@app.get("/cards/due", response_model=DueResponse)
async def due_cards(
    user_id: str | None = None,
    note_id: str | None = None,
    limit: int | None = Query(default=None, ge=0),
    config: AppConfig = Depends(get_config),
):
    """
    Cards due for review, most overdue first.
    Without note_id the merged view is capped at the session limit.
    """
    from cardwise.application.factory import get_card_repository, get_review_service

    try:
        with get_card_repository(config) as repo:
            service = get_review_service(config, repo)
            session = await service.due_cards(
                user_id or config.user_id, note_id=note_id, max_cards=limit
            )
    except Exception as e:
        logger.error(f"Due card fetch failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e

    return DueResponse(
        total_due=session.total_due,
        note_id=session.note_id,
        cards=[CardResponse.model_validate(c, from_attributes=True) for c in session.cards],
    )


class NoteDueResponse(BaseModel):
    note_id: str
    total_cards: int
    due_cards: int


class DueOverviewResponse(BaseModel):
    total_due: int
    notes: list[NoteDueResponse]


@app.get("/notes/due", response_model=DueOverviewResponse)
async def notes_due(user_id: str | None = None, config: AppConfig = Depends(get_config)):
    """
    Total and due card counts for each note.
    """
    from cardwise.application.factory import get_card_repository, get_review_service

    try:
        with get_card_repository(config) as repo:
            service = get_review_service(config, repo)
            overview = await service.due_overview(user_id or config.user_id)
    except Exception as e:
        logger.error(f"Note overview failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e

    return DueOverviewResponse(
        total_due=overview.total_due,
        notes=[NoteDueResponse.model_validate(n, from_attributes=True) for n in overview.notes],
    )


class StatsResponse(BaseModel):
    total: int
    due: int
    new: int
    learning: int
    mature: int
    average_ease: float
    retention_rate: int
    reviews_in_window: int
    window_days: int


@app.get("/stats", response_model=StatsResponse)
async def get_stats(user_id: str | None = None, config: AppConfig = Depends(get_config)):
    """
    Maturity buckets for all cards plus retention over the recent window.
    """
    from cardwise.application.factory import get_card_repository, get_stats_service

    try:
        with get_card_repository(config) as repo:
            summary = await get_stats_service(config, repo).summary(user_id or config.user_id)
    except Exception as e:
        logger.error(f"Stats fetch failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e

    s = summary.stats
    return StatsResponse(
        total=s.total,
        due=s.due,
        new=s.new,
        learning=s.learning,
        mature=s.mature,
        average_ease=s.average_ease,
        retention_rate=summary.retention_rate,
        reviews_in_window=summary.reviews_in_window,
        window_days=summary.window_days,
    )


class ImportRequest(BaseModel):
    cards: list[dict]
    note_id: str | None = None
    user_id: str | None = None


@app.post("/cards/import")
async def import_cards(req: ImportRequest, config: AppConfig = Depends(get_config)):
    """
    Create cards from generated question/answer records.
    """
    from cardwise.application.factory import get_card_repository, get_review_service

    try:
        with get_card_repository(config) as repo:
            service = get_review_service(config, repo)
            cards = await service.import_cards(
                req.user_id or config.user_id, req.cards, note_id=req.note_id
            )
    except DeckFormatError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Import failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e

    return {"created": len(cards), "ids": [c.id for c in cards]}
