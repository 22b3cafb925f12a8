"""Local source/date filters over the canonical article list."""

from __future__ import annotations

from datetime import date, tzinfo
from typing import List, Optional, Sequence, Union

from newsfeed.models.domain import Article

DateFilter = Union[date, str, None]


def parse_date_filter(value: DateFilter) -> Optional[date]:
    """Accept a ``date`` or a ``YYYY-MM-DD`` string; blank means no filter."""
    if value is None:
        return None
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    return date.fromisoformat(text)


def local_day(article: Article, tz: Optional[tzinfo] = None) -> Optional[date]:
    """Calendar day of the article in the viewer's zone (system zone if ``tz`` is None)."""
    if article.published_at is None:
        return None
    return article.published_at.astimezone(tz).date()


def filter_articles(
    articles: Sequence[Article],
    source: Optional[str] = None,
    day: DateFilter = None,
    tz: Optional[tzinfo] = None,
) -> List[Article]:
    """Return the articles matching both the source and the local-day predicate.

    The input is neither mutated nor assumed to be sorted. Undated articles
    only survive when no date filter is active.
    """
    wanted_day = parse_date_filter(day)
    wanted_source = source or None

    result: List[Article] = []
    for article in articles:
        if wanted_source is not None and article.source != wanted_source:
            continue
        if wanted_day is not None and local_day(article, tz) != wanted_day:
            continue
        result.append(article)
    return result
