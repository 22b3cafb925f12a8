from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from newsfeed.models.domain import Article, ArticleCard
from newsfeed.services.stats import count_last_24h, count_new, derive_stats, is_recent

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


def _card(recent: bool) -> ArticleCard:
    return ArticleCard(
        source="G1",
        date_label="",
        title="t",
        link="l",
        summary=None,
        type_label="General",
        city=None,
        recent=recent,
    )


def _article(age: timedelta) -> Article:
    return Article(source="G1", title="t", link="l", published_at=NOW - age)


def test_recent_boundary():
    assert is_recent(NOW - timedelta(minutes=9, seconds=59), NOW)
    assert not is_recent(NOW - timedelta(minutes=10), NOW)
    assert not is_recent(NOW - timedelta(minutes=10, seconds=1), NOW)
    assert not is_recent(None, NOW)


def test_count_new_counts_only_recent_cards():
    assert count_new([_card(True), _card(False), _card(True)]) == 2
    assert count_new([]) == 0


def test_local_last_24h_recount():
    articles = [_article(timedelta(hours=1)), _article(timedelta(hours=23, minutes=59)), _article(timedelta(hours=25))]
    assert count_last_24h(articles, NOW) == 2


def test_last_24h_is_server_value_even_when_local_recount_differs(caplog):
    # The server count is authoritative; the local recount is only reported.
    articles = [_article(timedelta(hours=1)), _article(timedelta(hours=30))]

    with caplog.at_level(logging.INFO, logger="newsfeed.services.stats"):
        stats = derive_stats([_card(True)], server_last_24h=42, articles=articles, now=NOW)

    assert stats.last_24h_count == 42
    assert stats.new_count == 1
    assert any(r.getMessage() == "stats.last24h.diverged" for r in caplog.records)


def test_no_divergence_log_when_counts_agree(caplog):
    articles = [_article(timedelta(hours=1))]

    with caplog.at_level(logging.INFO, logger="newsfeed.services.stats"):
        stats = derive_stats([], server_last_24h=1, articles=articles, now=NOW)

    assert stats.last_24h_count == 1
    assert not caplog.records
