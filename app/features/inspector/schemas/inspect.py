from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InspectRequest(BaseModel):
    url: Optional[str] = None


class ImageSource(str, Enum):
    OG_IMAGE = "og_image"
    TWITTER_IMAGE = "twitter_image"
    APPLE_TOUCH_ICON = "apple_touch_icon"
    ICON = "icon"
    SHORTCUT_ICON = "shortcut_icon"


class ImageCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: ImageSource
    ref: str


class ParsedDocument(BaseModel):
    """Everything the downstream stages need from one fetched page."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    image_candidates: Tuple[ImageCandidate, ...] = ()
    links: Tuple[str, ...] = ()
    internal_links: Tuple[str, ...] = ()
    total_anchors: int = 0
    internal_count: int = 0
    external_count: int = 0
    text_blocks: Tuple[str, ...] = ()

    def summary_text(self) -> str:
        return " ".join(" ".join(self.text_blocks).split())


class ResolvedImage(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    absolute_url: Optional[str] = Field(default=None, exclude=True)
    mime_type: Optional[str] = None
    encoded_bytes: Optional[str] = Field(default=None, alias="base64")

    @property
    def is_empty(self) -> bool:
        return self.encoded_bytes is None


class LinkClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = 0
    internal: int = 0
    external: int = 0
    broken: List[str] = []


class InspectionResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    title: str = ""
    ai_summary: str
    image: ResolvedImage = ResolvedImage()
    links: LinkClassification = LinkClassification()
