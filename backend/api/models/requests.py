"""
Pydantic request models for API endpoints.
"""
from pydantic import BaseModel, Field
from typing import Any, List, Optional


class ChatRequest(BaseModel):
    """Request model for a student question."""
    message: str = Field(..., min_length=1, description="Student question")
    video_timestamp: Optional[float] = Field(
        default=None, ge=0, description="Playback position in seconds (defaults to the latest transcript token)"
    )
    recent_transcript: Optional[str] = Field(default=None, description="Transcript window text (overrides session_id)")
    session_id: Optional[str] = Field(default=None, description="Session whose transcript supplies the window")
    student_name: Optional[str] = Field(default=None, description="Student name used in the greeting")
    language: Optional[str] = Field(default=None, description="'hindi' or 'english' (or hi/en)")
    pdf_context: Optional[str] = Field(default=None, description="Board/slide description")


class RecognitionResultRequest(BaseModel):
    """One recognition result: raw tokens {text, start_ms, end_ms, is_final, confidence}."""
    tokens: List[Any] = Field(default_factory=list, description="Recognizer tokens")


class BoardScanRequest(BaseModel):
    """Request model for board analysis."""
    image: str = Field(default="", description="Image URL or base64 data URL")
