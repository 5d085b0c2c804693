"""
Selling an object through the Vingd sandbox.

Registers an object, creates an order for it and prints the URL the buyer
should be sent to. Run it again with the token from the callback URL to
verify and commit the purchase:

    python sell_object.py '{"oid": 123, "tid": "a1b2c3"}'

Credentials are read from VINGD_USERNAME and VINGD_PASSWORD.
"""

import logging
import os
import sys
from pathlib import Path

# Add the project root to the path to import vingd
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from vingd import BrokerError, VingdClient


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)

    client = VingdClient.sandbox(
        os.environ["VINGD_USERNAME"], os.environ["VINGD_PASSWORD"]
    )
    try:
        if len(sys.argv) > 1:
            purchase = client.verify_purchase(sys.argv[1])
            logger.info(
                "Verified purchase %s (context: %s)",
                purchase.purchase_id,
                purchase.context,
            )
            client.commit_purchase(purchase)
            logger.info("Purchase committed, balance: %s", client.get_account_balance())
            return

        oid = client.create_object("Example article", "http://localhost:8000/article")
        logger.info("Registered object %s", oid)

        order = client.create_order(oid, "1.99", context="example", expires="+1 hour")
        logger.info("Order %s expires at %s", order.id, order.expires)
        logger.info("Send the buyer to: %s", order.urls.redirect)
    except BrokerError:
        logger.exception("Broker refused the request")
        sys.exit(1)


if __name__ == "__main__":
    main()
