#!/usr/bin/env python
"""
Print the price ladder of a team item: price at every discount step.

Usage:
    python scripts/price_ladder.py k-play-mat-team
    python scripts/price_ladder.py k-play-mat-team --explain 250
"""
import argparse
import sys
from pathlib import Path

import pandas as pd

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from team_pricing.config.settings import get_settings, configure_logging
from team_pricing.engine.pricing_engine import (
    compute_pricing_progress,
    effective_step_every,
    explain_pricing,
    format_trace,
)
from team_pricing.errors import TeamPricingError
from team_pricing.services.team_items_service import TeamItemsService


def build_ladder(pricing, max_steps: int = 40) -> pd.DataFrame:
    """One row per step boundary until the price stops moving."""
    step_every = effective_step_every(pricing)
    rows = []
    for step in range(max_steps + 1):
        progress = compute_pricing_progress(pricing, step * step_every)
        rows.append({
            "participants": step * step_every,
            "discount_percent": progress.discount_percent,
            "price": progress.current_price,
        })
        if progress.to_next_step == 0:
            break
    return pd.DataFrame(rows)


def main():
    parser = argparse.ArgumentParser(description="Show the price ladder of a team item")
    parser.add_argument("slug")
    parser.add_argument("--explain", type=int, metavar="COUNT",
                        help="explain the price at this participant count")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)
    service = TeamItemsService(settings.team_items_csv, settings.participants_csv)

    try:
        item = service.require_item(args.slug)
    except TeamPricingError as e:
        print(f"❌ {e.explanation}")
        sys.exit(1)

    count = service.count_participants(item.id)
    print(f"{item.title} ({item.slug}) - {count} participant(s)")
    print(build_ladder(item.pricing).to_string(index=False))

    if args.explain is not None:
        print()
        print(format_trace(explain_pricing(item.pricing, args.explain)))


if __name__ == "__main__":
    main()
