import logging
from typing import Any, Dict, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from src.config import Settings, get_settings
from src.errors import TransportError
from src.structs import (
    Container,
    ContainerResult,
    EpisodeList,
    EpisodesResult,
    ErrorList,
    Failure,
    Success,
)

logger = logging.getLogger(__name__)

CONTAINER_PATH = "/v2/programmes/{programme_id}/container"
EPISODES_PATH = "/v2/programmes/playable"
EPISODES_QUERY = {"sort": "sequential", "type": "episode", "experience": "domestic"}

M = TypeVar("M", bound=BaseModel)


def decode_envelope(payload: Any, model: Type[M]) -> Success[M] | Failure:
    """Decode a body that is either the success shape of `model` or an error list.

    The two shapes carry no discriminator, so the success shape is tried
    first and the error list second. A body matching neither is a
    transport problem, not an upstream-reported failure.
    """
    try:
        return Success(model.model_validate(payload))
    except ValidationError as e:
        success_error = e

    try:
        error_list = ErrorList.model_validate(payload)
    except ValidationError:
        message = (
            f"Malformed upstream response, expected {model.__name__} or an error list: "
            f"{success_error.error_count()} validation error(s)"
        )
        logger.warning(message)
        raise TransportError(message) from success_error

    return Failure(error_list.errors)


class SoundsClient:
    """Read-only client for the programmes API.

    A fresh HTTP session is opened for every call, nothing is pooled or
    cached between calls.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.base_url = (base_url or settings.upstream_base_url).rstrip("/")
        self.user_agent = user_agent or settings.user_agent
        self.timeout = timeout if timeout is not None else settings.upstream_timeout

    def fetch_container(self, programme_id: str) -> ContainerResult:
        """Fetch show metadata for `programme_id`"""
        url = self.base_url + CONTAINER_PATH.format(programme_id=programme_id)
        result = decode_envelope(self._get_json(url), Container)
        self._log_outcome(url, result)
        return result

    def fetch_episodes(self, programme_id: str) -> EpisodesResult:
        """Fetch the episode list of `programme_id`, upstream sorted"""
        url = self.base_url + EPISODES_PATH
        params = {"container": programme_id, **EPISODES_QUERY}
        result = decode_envelope(self._get_json(url, params=params), EpisodeList)
        self._log_outcome(url, result)
        return result

    def _get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        logger.debug("GET %s params=%s", url, params)
        try:
            with requests.Session() as session:
                response = session.get(
                    url,
                    params=params,
                    headers={"User-Agent": self.user_agent},
                    timeout=self.timeout,
                )
                # Error envelopes come with 4xx statuses, so the body is
                # decoded whatever the status code is.
                return response.json()
        except requests.RequestException as e:
            raise TransportError(f"Error requesting {url}: {e}", url=url) from e
        except ValueError as e:
            logger.warning("Non-JSON body from %s", url)
            raise TransportError(f"Upstream returned a non-JSON body for {url}: {e}", url=url) from e

    @staticmethod
    def _log_outcome(url: str, result: Success | Failure) -> None:
        if isinstance(result, Failure):
            logger.info("Upstream reported %d error(s) for %s: %s", len(result.errors), url, result.message)
        else:
            logger.debug("Decoded %s from %s", type(result.payload).__name__, url)
