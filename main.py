import logging
import sys
from typing import Optional

import typer


app = typer.Typer()


def _configure_logging(log_level: str):
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def serve(
    host: Optional[str] = None,
    port: Optional[int] = None,
    log_level: str = "info",
):
    """Run the feed relay until interrupted."""
    from src.config import get_settings
    from src.serve_podcast_feed import serve as serve_feeds

    _configure_logging(log_level)
    settings = get_settings()
    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port
    serve_feeds(settings)


@app.command()
def feed(programme_id: str, log_level: str = "warning"):
    """Print the RSS feed for one programme to stdout."""
    from src.pipeline import get_feed

    _configure_logging(log_level)
    response = get_feed(programme_id)
    if response.status != 200:
        print(f"{response.status}: {response.body}", file=sys.stderr)
        raise typer.Exit(code=1)
    print(response.body)


if __name__ == "__main__":
    app()
