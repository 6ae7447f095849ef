"""
Command-line entry point: load a URL in the browser and print what it captured.
"""

from __future__ import annotations

import asyncio
import json
import pathlib

import dotenv
import typer

from domcrawl import config
from domcrawl.browser import session as browser_session
from domcrawl.models import http
from domcrawl.utils import logger

log = logger.create_logger("CLI")

app = typer.Typer(help="Render pages in a real browser and capture the links and forms their traffic reveals")


async def crawl(
    target: str | http.Resource,
    capture: bool = True,
    settings: config.BrowserSettings | None = None,
) -> dict[str, object]:
    """Load *target* once and collect the captured pages and the page snapshot."""
    async with browser_session.BrowserSession(settings=settings) as session:
        if capture:
            session.start_capture()
        await session.load(target)
        session.stop_capture()

        snapshot = await session.to_page()
        return {
            "url": session.url,
            "pages": [page.model_dump(mode="json", exclude={"response": {"body"}}) for page in session.flush_pages()],
            "snapshot": snapshot.model_dump(mode="json") if snapshot else None,
        }


@app.command()
def main(
    url: str = typer.Argument(None, help="URL to load"),
    capture: bool = typer.Option(True, "--capture/--no-capture", help="Record traffic into pages"),
    replay: pathlib.Path = typer.Option(None, "--replay", "-r", help="Resource JSON file to render instead of fetching"),
) -> None:
    """Load a URL (or replay a saved resource) and print the result as JSON."""
    dotenv.load_dotenv()

    if replay is not None:
        target: str | http.Resource = http.Resource.model_validate_json(replay.read_text(encoding="utf-8"))
    elif url:
        target = url
    else:
        raise typer.BadParameter("Provide a URL or --replay FILE")

    label = target if isinstance(target, str) else target.url
    logger.start_log_file(label)
    log.start_timer("crawl")
    try:
        result = asyncio.run(crawl(target, capture=capture, settings=config.BrowserSettings()))
    finally:
        log.end_timer("crawl")
        logger.end_log_file()

    typer.echo(json.dumps(result, indent=2))


if __name__ == "__main__":
    app()
