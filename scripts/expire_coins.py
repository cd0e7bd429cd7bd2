"""Cron entry point: expire earned coins past their expires_at."""

import logging
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from aromasouq.config import settings
from aromasouq.database.session import get_db_context
from aromasouq.logging_config import setup_logging
from aromasouq.services.wallet_service import WalletService

logger = logging.getLogger("aromasouq.scripts.expire_coins")


def main():
    setup_logging(settings.LOG_LEVEL)
    with get_db_context() as db:
        result = WalletService(db, settings).expire_old_coins()
    logger.info(
        f"Coin expiry finished: {result.expired_count} entries, "
        f"{result.total_coins_expired} coins"
    )
    return result


if __name__ == "__main__":
    main()
