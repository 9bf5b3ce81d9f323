"""Data models for the tech news digest workflow."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, List

from pydantic import BaseModel, Field


class NewsItem(BaseModel):
    """A single news story returned by the search agent."""

    title: str
    summary: str = Field(..., description="At most two sentences.")
    publisher: str
    url: str = Field(..., description="Source URL taken from the search results.")
    category: str
    date: str = Field(
        ..., description="Publication date as YYYY-MM-DD or a relative phrase."
    )


class TechNewsDigest(BaseModel):
    """Structured output contract for the search agent."""

    items: List[NewsItem]
    notes: str = Field(
        ..., description="Why nothing was found; empty string otherwise."
    )


@dataclass(frozen=True)
class EmailPayload:
    subject: str
    body: str


@dataclass
class EmailOutcome:
    subject: str
    body: str
    sent: bool = False


@dataclass
class WorkflowResult:
    """Result of one digest run; `email` is None when nothing was found."""

    output_text: str
    output_parsed: TechNewsDigest
    email: EmailOutcome | None = None
    history: list[Any] = field(default_factory=list, repr=False)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "output_text": self.output_text,
            "output_parsed": self.output_parsed.model_dump(),
        }
        if self.email is not None:
            payload["email"] = dataclasses.asdict(self.email)
        return payload
