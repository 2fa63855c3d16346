"""
FastAPI main application.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from core.config import API_V1_PREFIX, CORS_ORIGINS, TRIAGE_POLICY, CLASSIFIER_MODEL, ANSWER_MODEL
from core.config_validator import config_validator
from api.routes import chat, sessions, media
from services.transcription.sessions import session_store

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Kaksha Live API",
    description="Live lecture transcript and student doubt triage API",
    version="1.0.0",
)


@app.on_event("startup")
async def validate_configuration():
    """Validate configuration on application startup."""

    print("🔍 Validating Kaksha Live configuration...")

    validation_result = config_validator.validate_all()

    # Print warnings
    for warning in validation_result["warnings"]:
        print(f"⚠️  WARNING: {warning}")

    # Print errors and fail if invalid
    if not validation_result["valid"]:
        print("\n❌ CONFIGURATION ERRORS DETECTED:\n")
        for error in validation_result["errors"]:
            print(f"   ❌ {error}")
        print("\n🛑 Application startup aborted due to configuration errors.\n")
        raise SystemExit(1)

    print(f"✅ Configuration validated (policy: {TRIAGE_POLICY}, classifier: {CLASSIFIER_MODEL}, answers: {ANSWER_MODEL})\n")


@app.on_event("shutdown")
async def stop_sessions():
    """Stop transcript ingestion workers."""
    session_store.close_all()


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat.router, prefix=f"{API_V1_PREFIX}/chat", tags=["chat"])
app.include_router(sessions.router, prefix=f"{API_V1_PREFIX}/sessions", tags=["sessions"])
app.include_router(media.router, prefix=API_V1_PREFIX, tags=["media"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Kaksha Live API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
