"""Helpers to load the digest JSON schema and validate agent output against it."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .models import TechNewsDigest


class DigestValidationError(ValueError):
    """Raised when the agent's structured output does not match the schema."""


@dataclass(frozen=True)
class ValidDigest:
    digest: TechNewsDigest


@dataclass(frozen=True)
class InvalidDigest:
    reason: str


ValidationOutcome = Union[ValidDigest, InvalidDigest]


def default_schema_path() -> Path:
    """Return the path to the bundled digest schema file."""
    return Path(__file__).resolve().parent / "schemas" / "tech_news.json"


@lru_cache(maxsize=1)
def load_schema(path: Optional[Path | str] = None) -> Dict[str, Any]:
    """Load and cache the digest schema as a dictionary."""
    schema_path = Path(path) if path else default_schema_path()
    return json.loads(schema_path.read_text(encoding="utf-8"))


def format_errors(errors: Iterable[ValidationError]) -> str:
    """Turn jsonschema errors into a concise human-readable string."""
    parts = []
    for err in errors:
        location = ".".join(str(piece) for piece in err.absolute_path) or "<root>"
        parts.append(f"{location}: {err.message}")
    return "; ".join(parts)


def _as_payload(candidate: Any) -> Any:
    if isinstance(candidate, BaseModel):
        return candidate.model_dump()
    if isinstance(candidate, (str, bytes)):
        return json.loads(candidate)
    return candidate


def validate_digest(
    candidate: Any, schema: Optional[Dict[str, Any]] = None
) -> ValidationOutcome:
    """
    Check a candidate agent response against the digest schema.

    Accepts a TechNewsDigest, a mapping, or a JSON string. Never raises for
    malformed input; the caller decides how to treat an InvalidDigest.
    """
    if candidate is None:
        return InvalidDigest("<root>: no output")
    try:
        payload = _as_payload(candidate)
    except json.JSONDecodeError as exc:
        return InvalidDigest(f"<root>: output is not valid JSON ({exc.msg})")
    except UnicodeDecodeError as exc:
        return InvalidDigest(f"<root>: output is not valid text ({exc.reason})")

    validator = Draft202012Validator(schema or load_schema())
    errors = sorted(
        validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path]
    )
    if errors:
        return InvalidDigest(format_errors(errors))

    try:
        # `notes` is optional in stored digests but always present in agent output.
        digest = TechNewsDigest.model_validate({"notes": "", **payload})
    except PydanticValidationError as exc:
        return InvalidDigest(str(exc))
    return ValidDigest(digest)


def require_valid(outcome: ValidationOutcome) -> TechNewsDigest:
    """Unwrap a validation outcome, raising DigestValidationError when invalid."""
    if isinstance(outcome, InvalidDigest):
        raise DigestValidationError(f"Schema validation failed: {outcome.reason}")
    return outcome.digest
