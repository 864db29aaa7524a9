from fastapi import FastAPI, HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List
import os
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv(dotenv_path=Path.cwd() / ".env")

from chief_of_staff.middleware.signature_middleware import verify_chat_signature
from chief_of_staff.orchestrator.decision_router import list_available_intents
from chief_of_staff.system import create_orchestrator

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the orchestrator once per process."""
    app.state.orchestrator = create_orchestrator()
    logger.info("Orchestrator ready")
    yield


app = FastAPI(title="Chief of Staff", lifespan=lifespan)

# Signed requests when CHAT_API_SECRET is set
app.add_middleware(BaseHTTPMiddleware, dispatch=verify_chat_signature)


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    user_id: str = Field(min_length=1)


class ClassifyRequest(BaseModel):
    message: str


class ClassifyResponse(BaseModel):
    intent: str
    confidence: float
    entities: Dict[str, Any]
    platforms: List[str]
    complexity: str
    agents: List[str]
    parallel: bool


class ChatResponse(BaseModel):
    success: bool
    message: str
    timestamp: str
    intent: Optional[str] = None
    results: Optional[List[Any]] = None
    partial_results: Optional[List[Any]] = None
    processing_summary: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def _get_orchestrator(request: Request):
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        orchestrator = create_orchestrator()
        request.app.state.orchestrator = orchestrator
    return orchestrator


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/intents")
async def intents():
    """Intents with a dedicated routing rule."""
    return {"intents": list_available_intents()}


@app.post("/chat", response_model=ChatResponse)
async def chat(body: ChatRequest, request: Request):
    """
    Run one user message through the orchestrator.

    Partial failures come back with success=false and partial_results;
    only a failure outside the orchestrator produces a 500.
    """
    logger.info(f"Chat request from {body.user_id}")
    try:
        result = await _get_orchestrator(request).submit(body.message, body.user_id)
    except Exception as e:
        logger.error(f"Chat API error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return result.to_dict()


@app.post("/classify", response_model=ClassifyResponse)
async def classify(body: ClassifyRequest, request: Request):
    """Show how a message would be routed without running any agent."""
    intent, plan = _get_orchestrator(request).route(body.message)
    return ClassifyResponse(
        intent=intent.name,
        confidence=intent.confidence,
        entities=intent.entities,
        platforms=intent.platforms,
        complexity=intent.complexity.value,
        agents=plan.agents,
        parallel=plan.parallel,
    )


def main():
    import uvicorn

    uvicorn.run(
        "chief_of_staff.ai_server:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
