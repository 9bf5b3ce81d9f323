"""End-to-end tech news digest workflow.

One run goes through these steps in order:
- check the OpenAI key (fatal when missing)
- snapshot run parameters into a ConfigState
- run the search agent once and validate its structured output (fatal on failure)
- format the digest email and try to send it (failures only mark `sent=False`)

Injected agent, runner and sender allow offline usage for tests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from agents import Agent, Runner, trace

from .agent_runner import (
    TRACE_METADATA,
    WORKFLOW_NAME,
    build_news_agent,
    run_news_search,
    user_turn,
)
from .config import ConfigState, Settings, get_settings
from .email_formatter import format_email
from .mailer import SmtpConfig, send_email
from .models import EmailOutcome, WorkflowResult
from .prompts import build_prompts
from .schema import require_valid

logger = logging.getLogger(__name__)

DEFAULT_INPUT = "Find the latest tech news"

Sender = Callable[[str, str, str], Awaitable[Any]]


def _require_api_key(settings: Settings) -> str:
    if not settings.openai_api_key:
        raise RuntimeError(
            "OPENAI_API_KEY is required. Set it in the environment or .env file."
        )
    return settings.openai_api_key


def _default_sender(settings: Settings) -> Sender:
    config = SmtpConfig.from_settings(settings)

    async def _send(to: str, subject: str, body: str) -> str:
        return await send_email(to, subject, body, config)

    return _send


async def _deliver(
    outcome: EmailOutcome,
    state: ConfigState,
    settings: Settings,
    sender: Optional[Sender],
) -> None:
    """Try to send the digest; any failure leaves `outcome.sent` False."""
    if not state.recipient_email:
        logger.warning("RECIPIENT_EMAIL not set. Skipping email send.")
        return
    if sender is None:
        if not settings.smtp_user:
            logger.warning(
                "SMTP_USER not set. Skipping email send. Set SMTP settings to enable email."
            )
            return
        sender = _default_sender(settings)
    try:
        await sender(state.recipient_email, outcome.subject, outcome.body)
    except Exception:
        logger.exception("Failed to send email to %s", state.recipient_email)
        return
    outcome.sent = True
    logger.info("Email sent to %s", state.recipient_email)


async def run_workflow(
    input_text: str = DEFAULT_INPUT,
    *,
    settings: Optional[Settings] = None,
    agent: Optional[Agent[ConfigState]] = None,
    runner: Optional[Runner] = None,
    sender: Optional[Sender] = None,
    send: bool = True,
) -> WorkflowResult:
    """
    Collect tech news with the search agent and email the digest.

    Raises when the OpenAI key is missing, when the agent call fails, or when
    its output does not match the digest schema. Email delivery problems never
    raise; they are logged and reported through `result.email.sent`.
    """
    active_settings = settings or get_settings()
    _require_api_key(active_settings)

    state = ConfigState.from_settings(active_settings)
    logger.info("Workflow state: %s", state.redacted())

    with trace(WORKFLOW_NAME, metadata=TRACE_METADATA):
        history: list[Any] = [user_turn(input_text)]
        search_agent = agent or build_news_agent(active_settings)
        outcome = await run_news_search(
            search_agent,
            build_prompts(state),
            state,
            history,
            runner=runner,
            max_turns=active_settings.max_turns,
        )
        digest = require_valid(outcome)
        logger.info("Agent returned %d news items", len(digest.items))

        result = WorkflowResult(
            output_text=digest.model_dump_json(),
            output_parsed=digest,
            history=history,
        )
        if not digest.items:
            logger.info("No news items found to send. %s", digest.notes)
            return result

        payload = format_email(digest.items, state.language)
        result.email = EmailOutcome(subject=payload.subject, body=payload.body)
        if send:
            await _deliver(result.email, state, active_settings, sender)
        else:
            logger.info("Email sending disabled for this run.")
        return result


def run_workflow_sync(input_text: str = DEFAULT_INPUT, **kwargs: Any) -> WorkflowResult:
    """Blocking wrapper around run_workflow for command-line use."""
    return asyncio.run(run_workflow(input_text, **kwargs))
