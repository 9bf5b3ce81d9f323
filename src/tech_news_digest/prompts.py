"""Prompt text for the tech news search agent, derived only from ConfigState."""

from __future__ import annotations

from dataclasses import dataclass

from .config import ConfigState

NO_TOPIC_FILTER = "all technology topics"


@dataclass(frozen=True)
class PromptBundle:
    instructions: str
    user_request: str


def _topics_text(state: ConfigState) -> str:
    return ", ".join(state.topics) if state.topics else NO_TOPIC_FILTER


def _hours_text(state: ConfigState) -> str:
    hours = float(state.recency_hours)
    return str(int(hours)) if hours.is_integer() else str(hours)


def build_instructions(state: ConfigState) -> str:
    """System instructions for the search agent."""
    return (
        "You are an agent for collecting and summarizing TECH news.\n"
        "You must use the web search tool. Do not respond from memory. Return only items "
        "that come from the search results (URLs must not be made up).\n"
        f"Goal: Find the most important news from the last {_hours_text(state)} hours "
        f"for topics: {_topics_text(state)}.\n"
        "Quality rules:\n"
        "- Prefer trustworthy sources (official blogs/company announcements, respected tech "
        "websites, security advisories, research labs).\n"
        "- Avoid clickbait and unsubstantiated leaks; if something is speculation, "
        "don't include it.\n"
        "- Prioritize articles with clear dates and direct links to sources.\n"
        "- Each item must have a URL, publisher, and publication date.\n"
        "- Summary: max 2 sentences.\n"
        "- Date: Include the publication date in format YYYY-MM-DD or a relative format "
        'like "2 hours ago" if exact date is not available.\n'
        f"Return maximum {state.max_items} items. If you don't find anything relevant, "
        "return items: [] and explain why in notes.\n"
        f"Output language: {state.language} (cs = Czech, en = English).\n"
        "The output must exactly match the JSON schema (no additional text outside JSON)."
    )


def build_user_request(state: ConfigState) -> str:
    """Per-run user turn restating the topics and time window."""
    return (
        "User request:\n"
        "Context:\n"
        f"Topics: {_topics_text(state)}\n"
        f"Time window: last {_hours_text(state)} hours\n"
        "Find and select the most important news and return them in structured JSON format.\n"
        "Make sure to include the publication date for each news item."
    )


def build_prompts(state: ConfigState) -> PromptBundle:
    return PromptBundle(
        instructions=build_instructions(state),
        user_request=build_user_request(state),
    )
