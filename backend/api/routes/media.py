"""
Board scan and voice question API routes.
"""
import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from api.models.requests import BoardScanRequest
from api.models.responses import BoardScanResponse, TranscriptionResponse
from core.llm_client import LLMServiceError
from services.media.board_scanner import board_scanner
from services.media.voice_transcriber import voice_transcriber

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/vision/analyze-board", response_model=BoardScanResponse)
def analyze_board(request: BoardScanRequest):
    """Describe the board in a captured frame, for use as question context."""
    if not request.image.strip():
        raise HTTPException(status_code=400, detail="No image provided")

    try:
        description = board_scanner.describe(request.image)
    except LLMServiceError as e:
        logger.error(f"Error in vision API: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to analyze image", "details": str(e)},
        )
    return BoardScanResponse(description=description, success=True)


@router.post("/transcribe", response_model=TranscriptionResponse)
def transcribe(audio: UploadFile = File(...), language: str = Form(default="en")):
    """Transcribe a recorded question (hi, en or hinglish)."""
    content = audio.file.read()
    if not content:
        raise HTTPException(status_code=400, detail="No audio file provided")

    try:
        text = voice_transcriber.transcribe(content, audio.filename or "question.webm", language)
    except LLMServiceError as e:
        logger.error(f"Error transcribing audio: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to transcribe audio"})
    return TranscriptionResponse(text=text)
