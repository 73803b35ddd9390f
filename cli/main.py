"""monojar CLI — entry-point for one-off parses and the HTTP server.

Usage:
    python cli/main.py --help

Commands:
    parse   → run the scraping pipeline once and print the result
    serve   → start the FastAPI app with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from monojar.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
from typing import Optional

import typer

from monojar.config import configure_logging, settings
from monojar.scraper import JarParseError, JarParser, is_valid_jar_url

app = typer.Typer(
    name="monojar",
    help="Monobank jar tracker CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level."),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(log_level.upper())


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------
@app.command("parse")
def parse(
    url: Optional[str] = typer.Argument(None, help="Jar URL (defaults to DEFAULT_JAR_URL)."),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON only."),
) -> None:
    """Scrape a jar page and print its title, amounts and progress."""
    jar_url = url or settings.default_jar_url
    if not is_valid_jar_url(jar_url):
        typer.echo(f"[parse] Invalid jar URL: {jar_url!r}", err=True)
        raise typer.Exit(2)

    if not as_json:
        typer.echo(f"[parse] Rendering {jar_url} …")
    try:
        data = asyncio.run(JarParser(settings).parse(jar_url))
    except JarParseError as exc:
        typer.echo(f"[parse] Failed ({exc.kind}): {exc}", err=True)
        raise typer.Exit(1)
    except Exception as exc:
        typer.echo(f"[parse] Failed: {exc}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(data.to_dict(), ensure_ascii=False))
        return

    typer.echo(f"[parse] Title     : {data.title or '(none)'}")
    typer.echo(f"[parse] Collected : {data.collected or '(none)'}")
    typer.echo(f"[parse] Target    : {data.target or '(none)'}")
    typer.echo(f"[parse] Progress  : {data.progress():.1f}%")


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(3001, help="Bind port."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    typer.echo(f"[serve] Listening on http://{host}:{port}")
    uvicorn.run("monojar.api.app:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
