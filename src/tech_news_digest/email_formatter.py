"""Render a validated news digest as a plain-text email."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from .models import EmailPayload, NewsItem

EMPTY_SUBJECT = "No Tech News Found"
EMPTY_BODY = "No relevant tech news was found for the specified criteria."
HEADERS = {"cs": "Nejnovější tech novinky:"}
DEFAULT_HEADER = "Latest Tech News:"
SUBJECT_TITLE_COUNT = 3
SUBJECT_TITLES_MAX = 50
SUBJECT_TITLES_CUT = 47
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def long_date(day: date) -> str:
    """Format a date like 'October 19, 2026'."""
    return f"{MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"


def subject_titles(items: Sequence[NewsItem]) -> str:
    joined = ", ".join(item.title for item in items[:SUBJECT_TITLE_COUNT])
    if len(joined) > SUBJECT_TITLES_MAX:
        return joined[:SUBJECT_TITLES_CUT] + "..."
    return joined


def format_email(
    items: Sequence[NewsItem], language: str = "en", *, today: Optional[date] = None
) -> EmailPayload:
    """
    Build the subject and plain-text body for a digest.

    Items keep their given order; numbering in the body is 1-based. An empty
    digest yields a fixed payload regardless of language.
    """
    if not items:
        return EmailPayload(subject=EMPTY_SUBJECT, body=EMPTY_BODY)

    current = today or date.today()
    lines = [HEADERS.get(language, DEFAULT_HEADER), ""]
    for index, item in enumerate(items, start=1):
        lines.append(f"{index}. [{item.category}] {item.title} ({item.date})")
        lines.append(f"   {item.summary}")
        lines.append(f"   Source: {item.publisher} - {item.url}")
        lines.append("")

    return EmailPayload(
        subject=f"{long_date(current)} - Latest Tech News: {subject_titles(items)}",
        body="\n".join(lines),
    )


def to_html(body: str) -> str:
    # Line breaks only; the body is not escaped.
    return body.replace("\n", "<br>")
