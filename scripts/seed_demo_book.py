#!/usr/bin/env python3
"""Seed a book with a simulated daily-collection business.

The book is written to the backend selected by MICROLEND_STORE (memory,
json or postgres). With KAFKA_ENABLED=true every ledger entry and audit
log is also streamed to Kafka.
"""

import argparse
import logging
import sys
import time
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from microlend.config import MicrolendConfig
from microlend.exceptions import MicrolendError
from microlend.logging import setup_logging
from microlend.reports import portfolio_totals, profit_and_loss, system_liquidity
from microlend.scenarios import DemoBookScenario
from microlend.sinks import KafkaEventSink
from microlend.store import open_store
from microlend.utils import format_money

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed a demo microlending book")
    parser.add_argument(
        "--collectors",
        type=int,
        default=3,
        help="Number of collectors, one route each (default: 3)",
    )
    parser.add_argument(
        "--loans",
        type=int,
        default=12,
        help="Loans originated per collector (default: 12)",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=60,
        help="Days simulated, ending at --end-date (default: 60)",
    )
    parser.add_argument(
        "--end-date",
        type=date.fromisoformat,
        default=None,
        help="Last simulated day, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--locale",
        type=str,
        default="en_PH",
        help="Faker locale for borrower data (default: en_PH)",
    )
    args = parser.parse_args()

    config = MicrolendConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    logger.info("Store backend: %s", config.store.backend)
    logger.info("Kafka: %s", config.kafka.bootstrap_servers if config.kafka.enabled else "DISABLED")

    start = time.perf_counter()
    store = open_store(config)
    events = KafkaEventSink(config.kafka) if config.kafka.enabled else None
    try:
        scenario = DemoBookScenario(
            num_collectors=args.collectors,
            loans_per_collector=args.loans,
            days=args.days,
            seed=args.seed,
            locale=args.locale,
            end_date=args.end_date,
            store=store,
            events=events,
        )
        book = scenario.generate()
    except MicrolendError as e:
        logger.error("Seeding failed: %s", e)
        sys.exit(1)
    finally:
        if events is not None:
            events.close()
        store.close()

    elapsed = time.perf_counter() - start
    symbol = config.lending.currency_symbol
    totals = portfolio_totals(book.loans)
    pnl = profit_and_loss(book.ledger, book.loans)

    print()
    print("=" * 60)
    print("DEMO BOOK SUMMARY")
    print("=" * 60)
    for name, count in book.summary().items():
        print(f"  {name:<12} {count:>8,}")
    print("-" * 60)
    print(f"  Loaned       {format_money(totals.loaned, symbol):>16}")
    print(f"  Collected    {format_money(totals.collected, symbol):>16}")
    print(f"  Outstanding  {format_money(totals.outstanding, symbol):>16}")
    print(f"  Liquidity    {format_money(system_liquidity(book.ledger), symbol):>16}")
    print(f"  Net profit   {format_money(pnl.net_profit, symbol):>16}")
    print("=" * 60)
    print(f"  Time: {elapsed:.2f}s")


if __name__ == "__main__":
    main()
