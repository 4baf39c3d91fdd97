from __future__ import annotations

import argparse
import os
import sys

from mood_ring.catalog_client import CatalogClient
from mood_ring.config import Settings, configure_logging, load_local_env_file
from mood_ring.errors import ArtistNotFoundError, CatalogError, EmptyFeatureSetError, EmptySearchError
from mood_ring.session import MoodRingSession, lookup_mood
from mood_ring.surface import PresentationSurface


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mood ring for an artist's top tracks")
    parser.add_argument("--artist", required=True, help="Artist name to search for")
    parser.add_argument(
        "--market",
        default=os.getenv("MOOD_RING_MARKET", "US"),
        help="Market used for top tracks (defaults to MOOD_RING_MARKET env or US)",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace, settings: Settings, client: CatalogClient | None = None) -> int:
    client = client or CatalogClient(market=args.market.upper(), requests_timeout=settings.requests_timeout)
    surface = PresentationSurface()
    try:
        session = MoodRingSession(client, surface, settings.credentials())
        session.start()
        lookup_mood(session, args.artist)
    except (ArtistNotFoundError, EmptySearchError, EmptyFeatureSetError) as exc:
        print(exc, file=sys.stderr)
        return 1
    except (CatalogError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(surface.render_text())
    return 0


def main(argv: list[str] | None = None) -> int:
    load_local_env_file()
    args = parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return run(args, settings)


if __name__ == "__main__":
    sys.exit(main())
