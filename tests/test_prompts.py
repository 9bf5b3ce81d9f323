from tech_news_digest.config import ConfigState
from tech_news_digest.prompts import (
    NO_TOPIC_FILTER,
    build_instructions,
    build_prompts,
    build_user_request,
)


def test_instructions_embed_run_parameters():
    state = ConfigState(language="cs", topics=("AI", "Security"), recency_hours=12, max_items=7)

    text = build_instructions(state)

    assert "last 12 hours" in text
    assert "topics: AI, Security" in text
    assert "Return maximum 7 items" in text
    assert "Output language: cs" in text


def test_instructions_carry_search_and_output_rules():
    text = build_instructions(ConfigState())

    assert "must use the web search tool" in text
    assert "Do not respond from memory" in text
    assert "URLs must not be made up" in text
    assert "URL, publisher, and publication date" in text
    assert "max 2 sentences" in text
    assert "YYYY-MM-DD" in text
    assert "items: []" in text
    assert "exactly match the JSON schema" in text


def test_empty_topics_mean_no_filter():
    state = ConfigState(topics=())
    assert NO_TOPIC_FILTER in build_instructions(state)
    assert f"Topics: {NO_TOPIC_FILTER}" in build_user_request(state)


def test_user_request_restates_topics_and_window():
    state = ConfigState(topics=("Chips",), recency_hours=36.5)

    text = build_user_request(state)

    assert "Topics: Chips" in text
    assert "Time window: last 36.5 hours" in text
    assert "publication date" in text


def test_build_prompts_is_deterministic():
    state = ConfigState(topics=("AI",))
    assert build_prompts(state) == build_prompts(state)


def test_large_recency_windows_render_as_plain_numbers():
    assert "last 1000000 hours" in build_instructions(ConfigState(recency_hours=1000000))
    assert "last 1234567 hours" in build_user_request(ConfigState(recency_hours=1234567.0))
    assert "last 0.5 hours" in build_user_request(ConfigState(recency_hours=0.5))
