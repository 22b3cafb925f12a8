from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from newsfeed.models.domain import Article
from newsfeed.services.filters import filter_articles, local_day, parse_date_filter

MINUS_5 = timezone(timedelta(hours=-5))


def _article(source: str, title: str, when: Optional[str]) -> Article:
    return Article(source=source, title=title, link=f"https://x.example/{title}", published_at=when)


ARTICLES = [
    _article("G1", "late-night", "2024-03-01T23:30:00Z"),
    _article("Folha", "after-midnight-utc", "2024-03-02T02:00:00"),
    _article("G1", "next-day", "2024-03-02T12:00:00"),
    _article("Folha", "undated", None),
]


def test_no_filters_is_identity():
    result = filter_articles(ARTICLES, None, None)
    assert result == ARTICLES
    assert result is not ARTICLES


def test_blank_filters_select_all():
    assert filter_articles(ARTICLES, "", "") == ARTICLES


def test_source_filter_is_exact():
    assert [a.title for a in filter_articles(ARTICLES, "G1")] == ["late-night", "next-day"]
    assert filter_articles(ARTICLES, "g1") == []


def test_date_filter_uses_local_calendar_day():
    result = filter_articles(ARTICLES, None, "2024-03-01", tz=MINUS_5)
    # 02:00 UTC on the 2nd is still the 1st at UTC-5
    assert [a.title for a in result] == ["late-night", "after-midnight-utc"]


def test_date_filter_in_utc_differs():
    result = filter_articles(ARTICLES, None, date(2024, 3, 1), tz=timezone.utc)
    assert [a.title for a in result] == ["late-night"]


def test_undated_excluded_only_when_date_filter_active():
    titles = [a.title for a in filter_articles(ARTICLES, "Folha", None)]
    assert "undated" in titles
    titles = [a.title for a in filter_articles(ARTICLES, "Folha", "2024-03-01", tz=MINUS_5)]
    assert titles == ["after-midnight-utc"]


def test_filters_combine_and_do_not_mutate_input():
    snapshot = list(ARTICLES)
    result = filter_articles(ARTICLES, "G1", "2024-03-02", tz=timezone.utc)
    assert [a.title for a in result] == ["next-day"]
    assert ARTICLES == snapshot


def test_zero_matches_is_empty_list():
    assert filter_articles(ARTICLES, "Estadão", None) == []


def test_local_day_and_date_parsing():
    assert local_day(ARTICLES[0], MINUS_5) == date(2024, 3, 1)
    assert local_day(ARTICLES[3]) is None
    assert parse_date_filter(" ") is None
    assert parse_date_filter("2024-03-01") == date(2024, 3, 1)
    with pytest.raises(ValueError):
        parse_date_filter("01/03/2024")


def test_default_zone_is_system_local():
    article = ARTICLES[0]
    expected = datetime(2024, 3, 1, 23, 30, tzinfo=timezone.utc).astimezone().date()
    assert filter_articles([article], None, expected) == [article]
