import re
from datetime import datetime, timezone
from typing import Tuple

from feedgen.entry import FeedEntry
from feedgen.feed import FeedGenerator
from lxml import etree

from src.config import DEFAULT_IMAGE_RECIPE
from src.errors import RenderError
from src.structs import Container, Episode, EpisodeList

SERIES_URL = "https://www.bbc.co.uk/sounds/series/{programme_id}"
FEED_AUTHOR = "BBC"
FEED_GENERATOR = "soundsproxy"
AUDIO_MIME_TYPE = "audio/mpeg"

# Stands in for empty required fields, which feedgen refuses to write
PLACEHOLDER = "-"

RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)

# Publication date used when an episode's release date cannot be parsed
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def replace_image_recipe(image_url: str, recipe: str = DEFAULT_IMAGE_RECIPE) -> str:
    return image_url.replace("{recipe}", recipe)


def format_duration(seconds: int) -> str:
    """Format seconds as H:MM:SS, or MM:SS under an hour"""
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def parse_release_date(value: str) -> datetime:
    """Parse an RFC 3339 timestamp, or return the Unix epoch"""
    if not RFC3339_PATTERN.match(value):
        return EPOCH
    try:
        return datetime.fromisoformat(value.upper())
    except ValueError:
        return EPOCH


class PodcastFeedGenerator:
    def __init__(self, image_recipe: str = DEFAULT_IMAGE_RECIPE, author: str = FEED_AUTHOR):
        self.image_recipe = image_recipe
        self.author = author

    def generate_feed(self, programme_id: str, container: Container, episodes: EpisodeList) -> str:
        """
        Render the show and its episodes as an RSS 2.0 document with iTunes tags.
        Items keep the upstream order.
        """
        try:
            fg = FeedGenerator()
            fg.load_extension("podcast")

            fg.title(container.titles.primary or PLACEHOLDER)
            fg.description(container.synopses.medium or PLACEHOLDER)
            fg.link(href=SERIES_URL.format(programme_id=programme_id), rel="alternate")
            fg.generator(FEED_GENERATOR)

            fg.podcast.itunes_author(self.author)
            fg.podcast.itunes_block(True)
            fg.podcast.itunes_complete("no")
            fg.podcast.itunes_image(replace_image_recipe(container.image_url, self.image_recipe))

            dated_entries = [self._add_episode(fg, episode) for episode in episodes.data]

            # Newer feedgen releases prepend on add_entry, so pin the upstream order
            fg.entry([entry for entry, _ in dated_entries], replace=True)
            # A fixed build date keeps the output identical for identical input
            fg.lastBuildDate(max((published for _, published in dated_entries), default=EPOCH))

            root = etree.fromstring(fg.rss_str(), etree.XMLParser(remove_blank_text=True))
        except ValueError as e:
            raise RenderError(f"Could not render feed for {programme_id}: {e}", programme_id) from e

        self._set_required_text(root, container, episodes)
        return etree.tostring(root, pretty_print=True, xml_declaration=True, encoding="UTF-8").decode("utf-8")

    @staticmethod
    def _set_required_text(root, container: Container, episodes: EpisodeList) -> None:
        """Write the real titles and descriptions over the placeholders, empty ones included"""
        channel = root.find("channel")
        channel.find("title").text = container.titles.primary
        channel.find("description").text = container.synopses.medium

        for item, episode in zip(channel.iterfind("item"), episodes.data):
            item.find("title").text = episode.titles.secondary
            item.find("description").text = episode.synopses.long

    def _add_episode(self, fg: FeedGenerator, episode: Episode) -> Tuple[FeedEntry, datetime]:
        high = episode.download.quality_variants.high
        published = parse_release_date(episode.release.date)

        fe = fg.add_entry()
        fe.title(episode.titles.secondary or PLACEHOLDER)
        fe.description(episode.synopses.long or PLACEHOLDER)
        fe.enclosure(high.file_url, str(high.file_size), AUDIO_MIME_TYPE)
        fe.published(published)

        fe.podcast.itunes_image(replace_image_recipe(episode.image_url, self.image_recipe))
        fe.podcast.itunes_duration(format_duration(episode.duration.value))
        fe.podcast.itunes_subtitle(episode.synopses.short)

        return fe, published


def build_rss(programme_id: str, container: Container, episodes: EpisodeList,
              image_recipe: str = DEFAULT_IMAGE_RECIPE) -> str:
    return PodcastFeedGenerator(image_recipe=image_recipe).generate_feed(programme_id, container, episodes)
