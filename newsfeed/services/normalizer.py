"""Normalize raw API payloads into the canonical article list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from newsfeed.connectors.base import NormalizationError
from newsfeed.models.domain import Article, ViewSelector
from newsfeed.utils.logging import get_logger

logger = get_logger(__name__)


class _Envelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    last_24h_count: int = Field(..., ge=0, validation_alias=AliasChoices("last24hCount", "last_24h_count"))


class _ArticlesEnvelope(_Envelope):
    articles: List[Any] = Field(..., validation_alias=AliasChoices("articles", "noticias"))


class _OptionalArticlesEnvelope(_Envelope):
    articles: Optional[List[Any]] = Field(None, validation_alias=AliasChoices("articles", "noticias"))


class _PortalGroupPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    portal_label: str = Field(..., min_length=1, validation_alias=AliasChoices("portalLabel", "portal"))
    articles: Optional[List[Any]] = Field(None, validation_alias=AliasChoices("articles", "noticias"))


class _PortalsEnvelope(_Envelope):
    portals: List[_PortalGroupPayload]


@dataclass(frozen=True)
class NormalizedFeed:
    articles: List[Article]
    last_24h_count: int


def _validate(model: type[BaseModel], payload: Any, view: ViewSelector) -> Any:
    if not isinstance(payload, dict):
        raise NormalizationError(f"{view} payload must be an object, got {type(payload).__name__}")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise NormalizationError(f"{view} payload does not match the expected shape: {exc}") from exc


def normalize_article(raw: Any, default_source: Optional[str] = None) -> Optional[Article]:
    """Build one Article, or ``None`` when the record is malformed.

    Malformed records (not an object, blank title/link/source) are logged
    and dropped so one bad item never aborts the batch.
    """
    if not isinstance(raw, dict):
        logger.warning("normalize.article.dropped", extra={"reason": "not_an_object"})
        return None
    item: Dict[str, Any] = dict(raw)
    if default_source and not item.get("fonte"):
        item["fonte"] = default_source
    try:
        return Article.model_validate(item)
    except ValidationError as exc:
        logger.warning(
            "normalize.article.dropped",
            extra={
                "reason": "invalid_fields",
                "fields": sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")}),
                "link": item.get("link"),
            },
        )
        return None


def _normalize_items(items: Optional[List[Any]], default_source: Optional[str] = None) -> List[Article]:
    articles: List[Article] = []
    for raw in items or []:
        article = normalize_article(raw, default_source)
        if article is not None:
            articles.append(article)
    return articles


def normalize_payload(payload: Any, view: ViewSelector) -> NormalizedFeed:
    """Turn a raw response for ``view`` into ``(articles, last_24h_count)``.

    Raises:
        NormalizationError: the payload lacks the fields its view requires.
    """
    if view.kind == "all":
        env = _validate(_ArticlesEnvelope, payload, view)
        return NormalizedFeed(_normalize_items(env.articles), env.last_24h_count)

    if view.kind == "by_portal":
        env = _validate(_PortalsEnvelope, payload, view)
        articles: List[Article] = []
        # group order as received, each group's internal order preserved
        for group in env.portals:
            articles.extend(_normalize_items(group.articles, default_source=group.portal_label))
        return NormalizedFeed(articles, env.last_24h_count)

    env = _validate(_OptionalArticlesEnvelope, payload, view)
    return NormalizedFeed(_normalize_items(env.articles), env.last_24h_count)


def portal_labels(payload: Any) -> List[str]:
    """Portal labels of a ``/portals`` response, in received order."""
    env = _validate(_PortalsEnvelope, payload, ViewSelector.by_portal())
    return [group.portal_label.strip() for group in env.portals if group.portal_label.strip()]
