# scripts/create_user.py
"""
Provision a login user for a company (the company is created if missing).

    python -m scripts.create_user --company "Acme" --email ops@acme.io --password s3cret
"""

import argparse
import getpass
import logging

from billing.config import get_settings
from billing.db.engine import get_engine
from billing.services.accounts import provision_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--company", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="prompted for when omitted")
    parser.add_argument("--name")
    parser.add_argument("--role", default="admin")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    password = args.password or getpass.getpass("Password: ")

    settings = get_settings()
    engine = get_engine(settings.database_url, timeout=settings.db_timeout_seconds)
    created = provision_user(
        engine,
        company_name=args.company,
        email=args.email,
        password=password,
        role=args.role,
        name=args.name,
        rounds=settings.bcrypt_rounds,
    )
    logger.info("Company id:  %s", created["company_id"])
    logger.info("User id:     %s", created["user_id"])


if __name__ == "__main__":
    main()
