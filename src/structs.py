from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SoundsModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Titles(SoundsModel):
    primary: str
    secondary: str

    @field_validator("primary", "secondary", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        return "" if value is None else value


class Synopses(SoundsModel):
    short: str
    medium: str
    long: str

    @field_validator("short", "medium", "long", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        return "" if value is None else value


class Container(SoundsModel):
    """Show-level metadata for a podcast series"""

    titles: Titles
    synopses: Synopses
    image_url: str


class Duration(SoundsModel):
    value: int = Field(ge=0)  # seconds
    label: str


class QualityVariant(SoundsModel):
    bitrate: int
    file_url: str
    file_size: int
    label: str


class QualityVariants(SoundsModel):
    # Only "high" is rendered, low and medium are kept for completeness
    low: QualityVariant
    medium: QualityVariant
    high: QualityVariant


class Download(SoundsModel):
    model_config = ConfigDict(populate_by_name=True)

    download_type: str = Field(alias="type")  # "non-drm"
    quality_variants: QualityVariants


class Release(SoundsModel):
    date: str
    label: str


class Episode(SoundsModel):
    titles: Titles
    synopses: Synopses
    image_url: str
    duration: Duration
    download: Download
    release: Release


class EpisodeList(SoundsModel):
    """Episodes in the order the upstream sorted them"""

    data: List[Episode]


class UpstreamError(SoundsModel):
    id: Optional[str] = None
    href: Optional[str] = None
    status: Optional[int] = None
    message: str
    replied_at: Optional[str] = None


class ErrorList(SoundsModel):
    errors: List[UpstreamError] = Field(min_length=1)


T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    payload: T


@dataclass(frozen=True)
class Failure:
    errors: List[UpstreamError]

    @property
    def message(self) -> str:
        """Message of the first reported error"""
        return self.errors[0].message


ContainerResult = Union[Success[Container], Failure]
EpisodesResult = Union[Success[EpisodeList], Failure]
