"""Domain DTOs for the feed pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from newsfeed.services import portal_codec

DEFAULT_ARTICLE_TYPE = "General"

ViewKind = Literal["all", "by_portal", "single_portal"]


def parse_published_at(value: Any) -> Optional[datetime]:
    """Parse a wire timestamp, treating naive values as UTC.

    Returns ``None`` for absent or unparseable values instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class Article(BaseModel):
    """Canonical article record (post-normalization)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = Field(..., alias="fonte", description="Portal display label")
    title: str = Field(..., alias="titulo")
    link: str
    published_at: Optional[datetime] = Field(None, alias="data", description="UTC publish time")
    article_type: str = Field(DEFAULT_ARTICLE_TYPE, alias="tipo")
    city: Optional[str] = Field(None, alias="cidade")
    content: Optional[str] = Field(None, alias="conteudo")

    @field_validator("source", "title", "link")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("must not be blank")
        return s

    @field_validator("published_at", mode="before")
    @classmethod
    def _coerce_utc(cls, v: Any) -> Optional[datetime]:
        return parse_published_at(v)

    @field_validator("article_type", mode="before")
    @classmethod
    def _default_type(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            return DEFAULT_ARTICLE_TYPE
        return str(v).strip()

    @field_validator("city", "content", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        s = str(v).strip()
        return s or None


@dataclass(frozen=True)
class ViewSelector:
    """Which remote resource is loaded and how it is shaped for display."""

    kind: ViewKind
    slug: Optional[str] = None

    @classmethod
    def all(cls) -> "ViewSelector":
        return cls("all")

    @classmethod
    def by_portal(cls) -> "ViewSelector":
        return cls("by_portal")

    @classmethod
    def single_portal(cls, label_or_slug: str) -> "ViewSelector":
        slug = portal_codec.encode(label_or_slug)
        if not slug:
            raise ValueError("portal label must not be blank")
        return cls("single_portal", slug)

    @classmethod
    def from_token(cls, token: str) -> "ViewSelector":
        """Parse a navigation token: ``all``, ``portals`` or ``portal-<label>``."""
        if token == "all":
            return cls.all()
        if token == "portals":
            return cls.by_portal()
        if token.startswith("portal-"):
            return cls.single_portal(token[len("portal-"):])
        raise ValueError(f"unknown view token: {token!r}")

    @property
    def is_grouped(self) -> bool:
        return self.kind == "by_portal"

    def __str__(self) -> str:
        return f"portal-{self.slug}" if self.kind == "single_portal" else self.kind


@dataclass(frozen=True)
class Portal:
    label: str
    slug: str


class PortalRegistry:
    """Known portals, ordered for the sidebar and the source filter."""

    def __init__(self, labels: Iterable[str]):
        by_slug: dict[str, Portal] = {}
        for label in labels:
            clean = label.strip()
            if not clean:
                continue
            slug = portal_codec.encode(clean)
            by_slug.setdefault(slug, Portal(label=clean, slug=slug))
        self._portals: List[Portal] = sorted(by_slug.values(), key=lambda p: portal_codec.sort_key(p.label))
        self._by_slug = by_slug

    def __iter__(self):
        return iter(self._portals)

    def __len__(self) -> int:
        return len(self._portals)

    def get(self, slug: str) -> Optional[Portal]:
        return self._by_slug.get(portal_codec.encode(slug))

    def source_options(self) -> List[str]:
        return [p.label for p in self._portals]

    def navigation(self) -> List[Tuple[str, ViewSelector]]:
        return [(p.label, ViewSelector("single_portal", p.slug)) for p in self._portals]


class FeedStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass
class FeedState:
    """Mutable feed state owned by the controller."""

    view: ViewSelector = field(default_factory=ViewSelector.all)
    status: FeedStatus = FeedStatus.IDLE
    articles: List[Article] = field(default_factory=list)
    filtered: List[Article] = field(default_factory=list)
    last_24h_count: int = 0
    last_updated: Optional[datetime] = None
    source_filter: Optional[str] = None
    date_filter: Optional[date] = None
    generation: int = 0


@dataclass(frozen=True)
class ArticleCard:
    source: str
    date_label: str
    title: str
    link: str
    summary: Optional[str]
    type_label: str
    city: Optional[str]
    recent: bool


@dataclass(frozen=True)
class PortalGroup:
    label: str
    cards: Tuple[ArticleCard, ...]


@dataclass(frozen=True)
class FeedStats:
    new_count: int
    last_24h_count: int


@dataclass(frozen=True)
class FeedView:
    """Everything the render sink needs for one render."""

    view: ViewSelector
    cards: Tuple[ArticleCard, ...]
    groups: Optional[Tuple[PortalGroup, ...]]
    stats: FeedStats
    last_update: str

    @property
    def is_empty(self) -> bool:
        return not self.cards
