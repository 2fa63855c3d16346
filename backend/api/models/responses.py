"""
Pydantic response models for API endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional


class ClassificationResponse(BaseModel):
    """Triage classification of a question."""
    is_genuine: bool
    category: str
    confidence: float = Field(ge=0, le=1)
    reason: str = ""


class ChatResponse(BaseModel):
    """Response model for a student question. `reply` is null for noise."""
    reply: Optional[str] = None
    classification: ClassificationResponse


class TokenResponse(BaseModel):
    """One transcript token."""
    id: str
    text: str
    start_time: float
    end_time: float
    is_final: bool
    confidence: float


class SentenceResponse(BaseModel):
    """One display sentence."""
    text: str
    start_time: float
    end_time: float
    is_final: bool
    boundary: str


class ApplyResultResponse(BaseModel):
    """Transcript size after applying a recognition result."""
    session_id: str
    token_count: int
    final_count: int


class TranscriptResponse(BaseModel):
    """Full transcript views for a session."""
    session_id: str
    token_count: int
    tokens: List[TokenResponse] = []
    recent_tokens: List[TokenResponse] = []
    sentences: List[SentenceResponse] = []


class WindowResponse(BaseModel):
    """Recent transcript window."""
    session_id: str
    reference_time: float
    horizon: float
    tokens: List[TokenResponse] = []
    text: str = ""


class BoardScanResponse(BaseModel):
    """Board content description."""
    description: str
    success: bool = True


class TranscriptionResponse(BaseModel):
    """Transcribed voice question."""
    text: str
