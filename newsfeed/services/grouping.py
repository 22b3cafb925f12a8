"""Ordering and by-portal grouping of the filtered list."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from newsfeed.models.domain import Article


def _sort_key(article: Article) -> Tuple[int, float]:
    if article.published_at is None:
        return (0, 0.0)
    return (1, article.published_at.timestamp())


def sort_articles(articles: Sequence[Article]) -> List[Article]:
    """Newest first; ties and undated articles keep their input order.

    ``sorted(..., reverse=True)`` is stable, so equal keys are not reordered
    across re-filters. Undated articles go last.
    """
    return sorted(articles, key=_sort_key, reverse=True)


def group_by_portal(articles: Sequence[Article]) -> List[Tuple[str, List[Article]]]:
    """Partition an already sorted list by ``source``.

    Groups are ordered by source label (plain, case-sensitive comparison);
    each group keeps the order it had in ``articles``.
    """
    groups: Dict[str, List[Article]] = {}
    for article in articles:
        groups.setdefault(article.source, []).append(article)
    return [(label, groups[label]) for label in sorted(groups)]
