"""
Voucher management example.

Creates a voucher in the sandbox and lists the active ones.
"""

import logging
import os
import sys
from pathlib import Path

# Add the project root to the path to import vingd
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from vingd import VingdClient, VingdError
from vingd.common.dates import to_human_date


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)

    client = VingdClient.sandbox(
        os.environ["VINGD_USERNAME"], os.environ["VINGD_PASSWORD"]
    )
    try:
        voucher = client.create_voucher(
            5, until="+2 weeks", message="Thanks for reading!", gid="welcome"
        )
        logger.info("Voucher %s, redeem at %s", voucher.code, voucher.urls.redirect)

        for active in client.get_active_vouchers():
            logger.info(
                "%s: %s vingds, valid until %s",
                active.code,
                active.amount,
                to_human_date(active.until),
            )
    except VingdError:
        logger.exception("Error")
        sys.exit(1)


if __name__ == "__main__":
    main()
