# billing/__main__.py
"""
    python -m billing
"""

import uvicorn

from billing.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "billing.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
