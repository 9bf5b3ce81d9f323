"""FastAPI service to trigger digest runs and preview digest emails."""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel, Field

from .email_formatter import format_email
from .schema import InvalidDigest, validate_digest
from .workflow import DEFAULT_INPUT, run_workflow

app = FastAPI(title="Tech News Digest")


class PreviewRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(default_factory=list)
    language: str = "en"


class RunRequest(BaseModel):
    input_text: str = DEFAULT_INPUT
    send: bool = True


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/digest/preview")
def preview_digest(request: PreviewRequest) -> dict:
    """Validate posted items and return the email they would produce."""
    outcome = validate_digest({"items": request.items})
    if isinstance(outcome, InvalidDigest):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=outcome.reason,
        )
    return dataclasses.asdict(format_email(outcome.digest.items, request.language))


@app.post("/digest/run")
async def run_digest(request: RunRequest) -> dict:
    """
    Run the full workflow once.

    Fatal workflow errors (missing key, agent failure, malformed output) map to
    502; a failed email send still returns 200 with `email.sent` false.
    """
    try:
        result = await run_workflow(request.input_text, send=request.send)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc
    return result.to_dict()
