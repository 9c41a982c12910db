import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Tuple, Union
from urllib.parse import urlsplit

from src.config import Settings, get_settings
from src.errors import TransportError
from src.podcast import PodcastFeedGenerator
from src.sounds_api import SoundsClient
from src.structs import ContainerResult, EpisodesResult, Failure

logger = logging.getLogger(__name__)

GREETING = "Hello, World"
RSS_CONTENT_TYPE = "application/rss+xml"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

ContainerOutcome = Union[ContainerResult, TransportError]
EpisodesOutcome = Union[EpisodesResult, TransportError]


@dataclass(frozen=True)
class FeedResponse:
    status: int
    body: str
    content_type: str = TEXT_CONTENT_TYPE


def _outcome(future: Future):
    """Unwrap a finished fetch, keeping transport errors as values"""
    error = future.exception()
    if error is None:
        return future.result()
    if isinstance(error, TransportError):
        return error
    raise error


def fetch_feed_sources(client: SoundsClient, programme_id: str) -> Tuple[ContainerOutcome, EpisodesOutcome]:
    """Fetch container and episodes concurrently and wait for both to finish"""
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="upstream") as executor:
        container_future = executor.submit(client.fetch_container, programme_id)
        episodes_future = executor.submit(client.fetch_episodes, programme_id)
    return _outcome(container_future), _outcome(episodes_future)


def reconcile(
    programme_id: str,
    container: ContainerOutcome,
    episodes: EpisodesOutcome,
    generator: PodcastFeedGenerator,
) -> FeedResponse:
    """Turn both fetch outcomes into a response.

    Transport errors win over upstream-reported failures, and the
    container is checked before the episodes in both cases.
    """
    for outcome in (container, episodes):
        if isinstance(outcome, TransportError):
            logger.warning("Upstream unavailable for %s: %s", programme_id, outcome)
            return FeedResponse(502, str(outcome))

    for outcome in (container, episodes):
        if isinstance(outcome, Failure):
            logger.info("Upstream rejected %s: %s", programme_id, outcome.message)
            return FeedResponse(404, outcome.message)

    rss = generator.generate_feed(programme_id, container.payload, episodes.payload)
    logger.info("Rendered feed for %s with %d episodes", programme_id, len(episodes.payload.data))
    return FeedResponse(200, rss, RSS_CONTENT_TYPE)


def get_feed(programme_id: str, settings: Optional[Settings] = None) -> FeedResponse:
    settings = settings or get_settings()
    client = SoundsClient(settings=settings)
    generator = PodcastFeedGenerator(image_recipe=settings.image_recipe)

    container, episodes = fetch_feed_sources(client, programme_id)
    return reconcile(programme_id, container, episodes, generator)


def handle(method: str, path: str, settings: Optional[Settings] = None) -> FeedResponse:
    """
    Route one request. GET /<id> produces a feed, everything else
    (including GET /) gets the greeting.
    """
    path = urlsplit(path).path
    if method == "GET" and path not in ("", "/"):
        return get_feed(path[1:], settings)
    return FeedResponse(200, GREETING)
