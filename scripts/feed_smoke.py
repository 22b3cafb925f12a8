"""Quick scraping API smoke test.

Usage:
  python scripts/feed_smoke.py --view all -n 5
  python scripts/feed_smoke.py --view "portal-Rádio CBN" --source "Rádio CBN" --date 2024-03-01

Reads configuration from .env via pydantic settings (NEWSFEED_API_BASE_URL).
Prints the stats and the top N cards of the requested view.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import List

from newsfeed.connectors.base import FeedError, StartupError
from newsfeed.connectors.scraping_api import ScrapingApiClient
from newsfeed.controller import FeedController
from newsfeed.models.domain import ViewSelector
from newsfeed.settings import get_settings
from newsfeed.sinks import InMemorySink
from newsfeed.utils.logging import configure_logging


async def _run(args: argparse.Namespace) -> int:
    cfg = get_settings()
    configure_logging(cfg.log_level, json_enabled=cfg.log_json)
    print("Config:", {"base_url": cfg.api_base_url, "timeout_s": int(cfg.request_timeout_seconds)})

    sink = InMemorySink()
    controller = FeedController(ScrapingApiClient(cfg), sink, tz=cfg.tzinfo())
    try:
        registry = await controller.bootstrap()
    except StartupError as exc:
        print(f"Startup error: {exc.user_message} ({exc.cause})")
        return 2
    print(f"Portals: {', '.join(registry.source_options()) or '-'}")

    controller.change_filter(source=args.source, day=args.date)
    if not await controller.select_view(ViewSelector.from_token(args.view)):
        print(f"Load error: {sink.errors[-1] if sink.errors else 'stale response'}")
        return 3

    view = sink.last_view
    assert view is not None
    print(f"Updated {view.last_update} | new: {view.stats.new_count} | last 24h: {view.stats.last_24h_count}")
    if view.groups is not None:
        for group in view.groups:
            print(f"== {group.label} ({len(group.cards)})")
            for card in group.cards[: args.top]:
                print(f"   {'*' if card.recent else ' '} {card.date_label} {card.title}\n     {card.link}")
        return 0
    for idx, card in enumerate(view.cards[: args.top], start=1):
        print(f"{idx}. {'*' if card.recent else ' '}[{card.source}] {card.date_label} {card.title}\n   {card.link}")
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Scraping API smoke test")
    parser.add_argument("--view", default="all", help="all | portals | portal-<label> (default: all)")
    parser.add_argument("-n", "--top", type=int, default=5, help="Print top N cards (default: 5)")
    parser.add_argument("--source", default=None, help="Keep only this portal label")
    parser.add_argument("--date", default=None, help="Keep only this local day (YYYY-MM-DD)")
    args = parser.parse_args(argv)
    try:
        return asyncio.run(_run(args))
    except FeedError as exc:  # unexpected
        print(f"Unexpected error: {exc}")
        return 4


if __name__ == "__main__":
    raise SystemExit(main())
