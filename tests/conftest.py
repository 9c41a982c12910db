"""
Shared test fixtures.

Provides upstream JSON payloads shaped like the programmes API replies:
- a show container
- an episode list
- an error envelope
"""

import copy
from typing import Any, Dict, List

import pytest

from src.config import Settings


CONTAINER_PAYLOAD: Dict[str, Any] = {
    "type": "container_item",
    "id": "p02nrss1",
    "urn": "urn:bbc:radio:series:p02nrss1",
    "titles": {"primary": "Desert Island Discs", "secondary": None, "tertiary": None},
    "synopses": {
        "short": "Guests share the soundtrack of their lives.",
        "medium": "Guests choose the eight records they would take to a desert island.",
        "long": None,
    },
    "image_url": "https://ichef.bbci.co.uk/images/ic/{recipe}/p09pn0ks.jpg",
}


def _variant(quality: str, bitrate: int, file_size: int) -> Dict[str, Any]:
    return {
        "bitrate": bitrate,
        "file_url": f"https://open.live.bbc.co.uk/mediaselector/{quality}.mp3",
        "file_size": file_size,
        "label": f"{quality.title()} quality ({bitrate}kbps)",
    }


def make_episode(
    number: int = 1,
    release_date: str = "2021-03-04T10:00:00Z",
    duration: int = 2520,
    synopses: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Build one playable item as returned by the episodes endpoint."""
    return {
        "type": "playable_item",
        "id": f"m000{number:04d}",
        "titles": {
            "primary": "Desert Island Discs",
            "secondary": f"Castaway {number}",
            "tertiary": None,
        },
        "synopses": synopses
        if synopses is not None
        else {
            "short": f"Short synopsis {number}",
            "medium": f"Medium synopsis {number}",
            "long": f"Long synopsis {number}",
        },
        "image_url": f"https://ichef.bbci.co.uk/images/ic/{{recipe}}/p0ep{number:04d}.jpg",
        "duration": {"value": duration, "label": f"{duration // 60} mins"},
        "download": {
            "type": "non-drm",
            "quality_variants": {
                "low": _variant(f"low-{number}", 48, 15_000_000 + number),
                "medium": _variant(f"medium-{number}", 96, 30_000_000 + number),
                "high": _variant(f"high-{number}", 128, 40_000_000 + number),
            },
        },
        "release": {"date": release_date, "label": "4 Mar 2021"},
    }


def make_episodes_payload(episodes: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "$schema": "https://rms.api.bbc.co.uk/docs/swagger.json#/definitions/PlayableItemsResponse",
        "total": len(episodes),
        "limit": 30,
        "offset": 0,
        "data": episodes,
    }


ERROR_PAYLOAD: Dict[str, Any] = {
    "$schema": "https://rms.api.bbc.co.uk/docs/swagger.json#/definitions/ErrorResponse",
    "errors": [
        {
            "id": "programme_not_found",
            "href": "https://confluence.dev.bbc.co.uk/display/RMServices/Errors",
            "status": 404,
            "message": "Programme not found",
            "replied_at": "2021-03-04T10:00:00.000Z",
        }
    ],
}


@pytest.fixture
def container_payload() -> Dict[str, Any]:
    return copy.deepcopy(CONTAINER_PAYLOAD)


@pytest.fixture
def episodes_payload() -> Dict[str, Any]:
    """Three episodes, newest release last to show order is not re-sorted."""
    return make_episodes_payload(
        [
            make_episode(1, "2021-03-04T10:00:00Z", duration=2520),
            make_episode(2, "2021-01-01T09:30:00+01:00", duration=3725),
            make_episode(3, "2022-06-30T23:59:59Z", duration=59),
        ]
    )


@pytest.fixture
def error_payload() -> Dict[str, Any]:
    return copy.deepcopy(ERROR_PAYLOAD)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        host="127.0.0.1",
        port=0,
        upstream_base_url="https://rms.example.test",
        user_agent="soundsproxy-test/0.1",
        image_recipe="288x288",
    )
