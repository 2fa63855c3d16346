"""
Chat (student question) API routes.
"""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.requests import ChatRequest
from api.models.responses import ChatResponse
from core.llm_client import LLMServiceError
from services.transcription.sessions import session_store
from services.triage.pipeline import build_pipeline

logger = logging.getLogger(__name__)

router = APIRouter()

triage_pipeline = build_pipeline()


@router.post("", response_model=ChatResponse)
def chat(request: ChatRequest):
    """
    Answer a student question from the recent class transcript.

    Every question is judged on its own, with no chat history. Noise gets
    `reply: null`, guidance a fixed acknowledgment, and subject questions
    a generated answer. The response shape is the same in all cases.
    """
    aggregator = None
    if request.recent_transcript is None and request.session_id:
        session = session_store.get(request.session_id)
        if session is not None:
            aggregator = session.aggregator

    try:
        result = triage_pipeline.handle(
            request.message,
            transcript_window=request.recent_transcript,
            aggregator=aggregator,
            reference_time=request.video_timestamp,
            language=request.language,
            student_name=request.student_name,
            supplementary_context=request.pdf_context,
        )
    except LLMServiceError as e:
        logger.error(f"Error in chat API: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process your request", "details": str(e)},
        )

    return result.envelope()
