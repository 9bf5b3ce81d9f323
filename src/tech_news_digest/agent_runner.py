"""Search agent wiring for the tech news digest using the Agents SDK."""

from __future__ import annotations

import logging
from typing import Any, Optional

from agents import (
    Agent,
    ModelSettings,
    OpenAIResponsesModel,
    RunConfig,
    RunContextWrapper,
    Runner,
    WebSearchTool,
)
from openai import AsyncOpenAI
from openai.types.responses.web_search_tool import UserLocation

from .config import ConfigState, Settings
from .models import TechNewsDigest
from .prompts import PromptBundle, build_instructions
from .schema import ValidationOutcome, validate_digest

logger = logging.getLogger(__name__)

AGENT_NAME = "Tech News Search Agent"
WORKFLOW_NAME = "Tech news agent"
TRACE_METADATA = {"__trace_source__": "tech-news-digest"}


def _instructions_from_context(
    run_context: RunContextWrapper[ConfigState], _agent: Agent[ConfigState]
) -> str:
    return build_instructions(run_context.context)


def build_client(api_key: Optional[str] = None) -> AsyncOpenAI:
    """Create an async OpenAI client; separated for easier testing."""
    return AsyncOpenAI(api_key=api_key)


def build_news_agent(
    settings: Settings, client: Optional[AsyncOpenAI] = None
) -> Agent[ConfigState]:
    """Create the search agent with the web search tool and structured output."""
    web_search = WebSearchTool(
        user_location=UserLocation(type="approximate"),
        search_context_size=settings.search_context_size,
    )
    return Agent(
        name=AGENT_NAME,
        instructions=_instructions_from_context,
        model=OpenAIResponsesModel(
            settings.news_model, client or build_client(settings.openai_api_key)
        ),
        tools=[web_search],
        output_type=TechNewsDigest,
        model_settings=ModelSettings(
            temperature=settings.temperature,
            top_p=settings.top_p,
            max_tokens=settings.max_tokens,
            store=settings.store,
        ),
    )


def user_turn(text: str) -> dict[str, Any]:
    """Conversation turn in the Responses input format."""
    return {"role": "user", "content": [{"type": "input_text", "text": text}]}


async def run_news_search(
    agent: Agent[ConfigState],
    prompts: PromptBundle,
    state: ConfigState,
    history: list[Any],
    *,
    runner: Optional[Runner] = None,
    max_turns: int = 10,
) -> ValidationOutcome:
    """
    Run the search agent once and check its final output against the schema.

    `history` is owned by the caller: it must already hold the caller's input
    turn, and the run's generated items are appended to it afterwards. Errors
    from the model provider propagate unchanged; nothing is retried here.
    """
    active_runner = runner or Runner()
    logger.info("Running %s (max %s items)", agent.name, state.max_items)
    result = await active_runner.run(
        agent,
        input=[*history, user_turn(prompts.user_request)],
        context=state,
        max_turns=max_turns,
        run_config=RunConfig(workflow_name=WORKFLOW_NAME, trace_metadata=TRACE_METADATA),
    )
    history.extend(item.to_input_item() for item in result.new_items)

    if result.final_output is None:
        raise RuntimeError("Agent result is undefined")
    return validate_digest(result.final_output)
