"""Display statistics: recent ("new") cards and the last-24h count."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from newsfeed.models.domain import Article, ArticleCard, FeedStats
from newsfeed.utils.logging import get_logger

RECENT_WINDOW = timedelta(minutes=10)
LAST_DAY_WINDOW = timedelta(hours=24)

logger = get_logger(__name__)


def is_recent(published_at: Optional[datetime], now: datetime) -> bool:
    """True iff ``now - published_at`` is under ten minutes."""
    if published_at is None:
        return False
    return now - published_at < RECENT_WINDOW


def count_new(cards: Iterable[ArticleCard]) -> int:
    return sum(1 for card in cards if card.recent)


def count_last_24h(articles: Iterable[Article], now: datetime) -> int:
    """Local recount over the loaded articles.

    Only used to report divergence; the displayed value is the server's.
    """
    return sum(1 for a in articles if a.published_at is not None and now - a.published_at < LAST_DAY_WINDOW)


def derive_stats(
    cards: Sequence[ArticleCard],
    server_last_24h: int,
    articles: Sequence[Article],
    now: datetime,
) -> FeedStats:
    local = count_last_24h(articles, now)
    if local != server_last_24h:
        logger.info(
            "stats.last24h.diverged",
            extra={"server_count": server_last_24h, "local_count": local, "loaded": len(articles)},
        )
    return FeedStats(new_count=count_new(cards), last_24h_count=server_last_24h)
