"""Configuration helpers for the tech news digest agent."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TRUE_VALUES = {"true", "1", "yes", "y", "on"}
_FALSE_VALUES = {"false", "0", "no", "n", "off"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    news_model: str = Field(
        "gpt-4.1",
        alias="NEWS_MODEL",
        description="Model backing the search agent; must support the web search tool.",
    )
    temperature: float = Field(1.0, description="Generation temperature.")
    top_p: float = Field(1.0, description="Nucleus sampling parameter.")
    max_tokens: int = Field(
        2048,
        description="Max output tokens for the agent; raise if digests are truncating.",
    )
    store: bool = Field(True, description="Ask the Responses API to store the response.")
    search_context_size: Literal["low", "medium", "high"] = Field(
        "medium", description="How much web context the search tool pulls in."
    )
    max_turns: int = Field(10, description="Upper bound on agent turns per run.")

    # Run parameters; parsed leniently so a bad value falls back to the default.
    language: str = Field("en", alias="LANGUAGE")
    topics: str = Field("", alias="TOPICS", description="Comma-separated topic list.")
    recency_hours: float = Field(24, alias="RECENCY_HOURS")
    max_items: int = Field(24, alias="MAX_ITEMS")
    must_include_sources: bool = Field(True, alias="MUST_INCLUDE_SOURCES")
    recipient_email: str | None = Field(None, alias="RECIPIENT_EMAIL")

    smtp_host: str = Field("smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(587, alias="SMTP_PORT")
    smtp_secure: bool = Field(
        False, alias="SMTP_SECURE", description="Implicit TLS (port 465) instead of STARTTLS."
    )
    smtp_user: str | None = Field(None, alias="SMTP_USER")
    smtp_password: str | None = Field(None, alias="SMTP_PASSWORD")
    smtp_app_password: str | None = Field(
        None, alias="SMTP_APP_PASSWORD", description="Gmail-style app password."
    )
    smtp_from: str | None = Field(None, alias="SMTP_FROM")

    @field_validator("recency_hours", "max_items", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any, info: ValidationInfo) -> Any:
        default = cls.model_fields[info.field_name].default
        try:
            number = float(value)
        except (TypeError, ValueError):
            return default
        if not math.isfinite(number) or number <= 0:
            return default
        if info.field_name == "max_items":
            return max(1, int(number))
        return number

    @field_validator("must_include_sources", mode="before")
    @classmethod
    def _lenient_bool(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return True
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        return True

    @field_validator("language", mode="before")
    @classmethod
    def _default_language(cls, value: Any) -> str:
        text = str(value or "").strip()
        return text or "en"


def get_settings() -> Settings:
    """Return a settings instance read from the current environment."""
    return Settings()


def parse_topics(raw: str | None) -> tuple[str, ...]:
    """Split a comma-delimited topic string, trimming and dropping empties."""
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class ConfigState:
    """Immutable snapshot of the parameters for a single digest run."""

    language: str = "en"
    topics: tuple[str, ...] = ()
    recency_hours: float = 24
    max_items: int = 24
    # Reserved: logged but not acted on anywhere in the pipeline yet.
    must_include_sources: bool = True
    recipient_email: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfigState":
        return cls(
            language=settings.language,
            topics=parse_topics(settings.topics),
            recency_hours=settings.recency_hours,
            max_items=settings.max_items,
            must_include_sources=settings.must_include_sources,
            recipient_email=settings.recipient_email,
        )

    def redacted(self) -> dict[str, Any]:
        """Loggable summary of the run parameters."""
        return {
            "language": self.language,
            "topics": list(self.topics),
            "recency_hours": self.recency_hours,
            "max_items": self.max_items,
            "must_include_sources": self.must_include_sources,
            "recipient_email": self.recipient_email,
        }
