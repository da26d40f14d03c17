#!/usr/bin/env python
"""
Run one scheduled AutoMatch batch.
Use: python run_matching.py  (invoke from cron or an orchestrator)
"""
import logging
import sys

from automatch.config import get_config
from automatch.notify import LoggingNotifier, WebhookNotifier
from automatch.pipeline import BatchScheduler
from automatch.store import MySQLCatalogStore


def main() -> int:
    """Run a batch against MySQL; exit non-zero if the run failed."""
    config = get_config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    store = MySQLCatalogStore(config.mysql)
    store.init_db()

    if config.notifier.webhook_url:
        notifier = WebhookNotifier(config=config.notifier)
    else:
        notifier = LoggingNotifier()

    scheduler = BatchScheduler(store, notifier=notifier, config=config)
    result = scheduler.run_scheduled_batch()
    return 0 if result.status == "COMPLETED" else 1


if __name__ == "__main__":
    sys.exit(main())
