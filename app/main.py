from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from pydantic import BaseModel, Field

from config.settings import get_settings
from responder.pipeline import build_pipeline


settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("responder")

app = FastAPI(title="WhatsApp AI Responder", version="1.0.0")

if settings.app_env.lower() in {"dev", "development", "local"}:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.state.pipeline = build_pipeline(settings)


class ReplyRequest(BaseModel):
    user_id: str = Field(..., description="Opaque identity of the sender, e.g. a WhatsApp JID")
    message: str = Field("", description="The user's message text")


class ReplyResponse(BaseModel):
    response: str
    command: Optional[str] = None
    terminate: bool = False


@app.post("/ai/reply", response_model=ReplyResponse)
async def reply(req: ReplyRequest) -> Dict[str, Any]:
    logger.info(
        "Incoming message: user_id=%s message_len=%s",
        req.user_id,
        len(req.message),
    )
    result = await app.state.pipeline.handle_message(req.user_id, req.message)
    return result.model_dump()


@app.get("/health")
def health():
    return {
        "status": "ok",
        "model": settings.gemini_model,
        "key_set": bool(settings.google_api_key),
        "sessions": len(app.state.pipeline.store),
    }
