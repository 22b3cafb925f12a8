"""Build render-ready view models from the filtered, sorted list."""

from __future__ import annotations

import unicodedata
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from newsfeed.models.domain import Article, ArticleCard, FeedView, PortalGroup, ViewSelector
from newsfeed.services.grouping import group_by_portal
from newsfeed.services.stats import derive_stats, is_recent

SUMMARY_MAX_CHARS = 120
ELLIPSIS = "..."


def truncate_summary(text: Optional[str], limit: int = SUMMARY_MAX_CHARS) -> Optional[str]:
    """First ``limit`` code points of ``text`` followed by an ellipsis.

    The cut never separates a base character from its combining marks.
    """
    if not text:
        return None
    cut = min(limit, len(text))
    while 0 < cut < len(text) and unicodedata.combining(text[cut]):
        cut -= 1
    return text[:cut].rstrip() + ELLIPSIS


def format_card_date(published_at: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    if published_at is None:
        return ""
    return published_at.astimezone(tz).strftime("%d/%m, %H:%M")


def format_clock(moment: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    if moment is None:
        return ""
    return moment.astimezone(tz).strftime("%H:%M:%S")


def build_card(article: Article, now: datetime, tz: Optional[tzinfo] = None) -> ArticleCard:
    return ArticleCard(
        source=article.source,
        date_label=format_card_date(article.published_at, tz),
        title=article.title,
        link=article.link,
        summary=truncate_summary(article.content),
        type_label=article.article_type,
        city=article.city,
        recent=is_recent(article.published_at, now),
    )


def build_view(
    view: ViewSelector,
    ordered: Sequence[Article],
    *,
    canonical: Sequence[Article],
    last_24h_count: int,
    now: datetime,
    last_updated: Optional[datetime],
    tz: Optional[tzinfo] = None,
) -> FeedView:
    """Assemble the FeedView for one render.

    ``ordered`` must already be filtered and sorted. Under the by-portal
    view the flat ``cards`` follow group order, so both shapes list the
    same cards.
    """
    groups: Optional[tuple[PortalGroup, ...]] = None
    if view.is_grouped:
        built: List[PortalGroup] = [
            PortalGroup(label=label, cards=tuple(build_card(a, now, tz) for a in items))
            for label, items in group_by_portal(ordered)
        ]
        groups = tuple(built)
        cards = tuple(card for group in built for card in group.cards)
    else:
        cards = tuple(build_card(a, now, tz) for a in ordered)

    return FeedView(
        view=view,
        cards=cards,
        groups=groups,
        stats=derive_stats(cards, last_24h_count, canonical, now),
        last_update=format_clock(last_updated, tz),
    )
