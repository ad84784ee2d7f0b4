# scripts/init_db.py

import logging

from billing.config import get_settings
from billing.db.engine import get_engine
from billing.db.schema import metadata

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    settings = get_settings()
    engine = get_engine(settings.database_url, timeout=settings.db_timeout_seconds)
    metadata.create_all(engine)
    logger.info("DB schema created at %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    main()
