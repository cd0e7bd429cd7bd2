"""Report wallets whose balance drifted from the ledger sum. Exits 1 on drift."""

import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from aromasouq.database.session import get_db_context
from aromasouq.services.wallet_service import WalletService


def main() -> int:
    with get_db_context() as db:
        checks = WalletService(db).verify_all()

    mismatches = [check for check in checks if check.status != "OK"]
    for check in mismatches:
        print(
            f"MISMATCH user={check.user_id} balance={check.wallet_balance} "
            f"ledger={check.ledger_sum} latest_balance_after={check.latest_balance_after}"
        )
    print(f"Checked {len(checks)} wallets, {len(mismatches)} mismatched")
    return 1 if mismatches else 0


if __name__ == "__main__":
    sys.exit(main())
