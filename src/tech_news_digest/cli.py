"""Command-line entry points for the tech news digest workflow."""

import json
import logging
import os
import traceback
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint

from .config import get_settings
from .email_formatter import format_email
from .schema import DigestValidationError, require_valid, validate_digest
from .workflow import DEFAULT_INPUT, run_workflow_sync

app = typer.Typer(help="Collect recent tech news with a search agent and email a digest.")


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _write_output(out_path: Path, json_payload: dict) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps(json_payload, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def _load_digest_payload(path: Path) -> dict:
    """Accept a bare digest ({"items": [...]}) or a saved workflow result."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and "output_parsed" in data:
        return data["output_parsed"]
    return data


@app.command("run")
def run_command(
    input_text: str = typer.Argument(
        DEFAULT_INPUT, help="Free-form request passed to the agent as the first turn."
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Optional path to write the workflow result as JSON.",
    ),
    no_email: bool = typer.Option(
        False, "--no-email", help="Build the digest email but do not send it."
    ),
):
    """
    Run the digest workflow once: search, validate, format, and email.

    Exits with status 1 when the run fails (missing OPENAI_API_KEY, agent error,
    or malformed agent output). A failed email send does not fail the run.
    """
    _configure_logging()
    settings = get_settings()
    rprint(f'[cyan]Running workflow with input: "{input_text}"[/cyan]')
    rprint(
        {
            "hasOpenAIKey": bool(settings.openai_api_key),
            "hasSmtpUser": bool(settings.smtp_user),
            "hasRecipient": bool(settings.recipient_email),
        }
    )

    try:
        result = run_workflow_sync(input_text, settings=settings, send=not no_email)
    except Exception as exc:
        rprint(f"[red]Error running workflow: {exc}[/red]")
        typer.echo(traceback.format_exc(), err=True)
        raise typer.Exit(code=1)

    payload = result.to_dict()
    if out:
        _write_output(out, payload)
        rprint(f"[cyan]Wrote output to {out}[/cyan]")
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    rprint("[green]Workflow completed successfully![/green]")


@app.command("preview")
def preview_command(
    path: Path = typer.Argument(
        ..., help="Digest JSON ({\"items\": [...]}) or a saved workflow result."
    ),
    language: str = typer.Option("en", "--language", "-l", help="Email language code."),
):
    """Render the email for a saved digest without calling the agent or SMTP."""
    try:
        digest = require_valid(validate_digest(_load_digest_payload(path)))
    except DigestValidationError as exc:
        raise typer.BadParameter(str(exc))
    email = format_email(digest.items, language)
    typer.echo(f"Subject: {email.subject}\n")
    typer.echo(email.body)


def main():
    app()


if __name__ == "__main__":
    main()
