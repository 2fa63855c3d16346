"""
Live transcript session API routes.
"""
import logging
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from api.models.requests import RecognitionResultRequest
from api.models.responses import ApplyResultResponse, TranscriptResponse, WindowResponse
from core.config import CONTEXT_WINDOW_SEC, RECENT_TOKEN_COUNT, FEED_APPLY_TIMEOUT_SEC
from models.transcript_models import transcript_text
from services.transcription.sessions import session_store, TranscriptSession

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_session(session_id: str) -> TranscriptSession:
    session = session_store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


@router.post("/{session_id}/results", response_model=ApplyResultResponse)
def apply_result(session_id: str, request: RecognitionResultRequest):
    """
    Apply one recognition result to the session transcript.

    Unusable tokens are dropped without error. The session is created on
    first use.
    """
    session = session_store.get_or_create(session_id)
    future = session.feed.submit(request.tokens)
    try:
        future.result(timeout=FEED_APPLY_TIMEOUT_SEC)
    except FutureTimeoutError:
        raise HTTPException(status_code=503, detail="Transcript update timed out")

    aggregator = session.aggregator
    return ApplyResultResponse(
        session_id=session_id,
        token_count=aggregator.token_count,
        final_count=aggregator.final_count,
    )


@router.get("/{session_id}/transcript", response_model=TranscriptResponse)
def get_transcript(session_id: str, recent: int = Query(default=RECENT_TOKEN_COUNT, ge=0)):
    """Current tokens, the recent-token display list and sentences."""
    aggregator = _require_session(session_id).aggregator
    tokens = aggregator.snapshot()
    return TranscriptResponse(
        session_id=session_id,
        token_count=len(tokens),
        tokens=[asdict(t) for t in tokens],
        recent_tokens=[asdict(t) for t in tokens[-recent:]] if recent else [],
        sentences=[asdict(s) for s in aggregator.to_sentences()],
    )


@router.get("/{session_id}/window", response_model=WindowResponse)
def get_window(
    session_id: str,
    reference_time: float = Query(..., ge=0),
    horizon: Optional[float] = Query(default=None, gt=0),
):
    """Tokens within `horizon` seconds before `reference_time`."""
    aggregator = _require_session(session_id).aggregator
    horizon = CONTEXT_WINDOW_SEC if horizon is None else horizon
    tokens = aggregator.recent_window(reference_time, horizon)
    return WindowResponse(
        session_id=session_id,
        reference_time=reference_time,
        horizon=horizon,
        tokens=[asdict(t) for t in tokens],
        text=transcript_text(tokens),
    )


@router.delete("/{session_id}/transcript")
def clear_transcript(session_id: str):
    """Clear the transcript (new video)."""
    if not session_store.reset(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    logger.info(f"Cleared transcript for session {session_id}")
    return {"session_id": session_id, "token_count": 0}


@router.delete("/{session_id}")
def end_session(session_id: str):
    """Drop the session and stop its ingestion worker."""
    if not session_store.drop(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"session_id": session_id, "status": "closed"}
