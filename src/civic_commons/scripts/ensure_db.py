"""Utility script to create (or reset) the configured database schema."""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from civic_commons.core.logging_config import configure_logging
from civic_commons.db.session import create_tables, drop_tables, engine

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ensure or reset the configured database")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop every table before recreating the schema.",
    )
    args = parser.parse_args(argv)

    configure_logging()
    try:
        if args.drop_tables:
            drop_tables()
            logger.info("[ensure_db] dropped all tables on %s", engine.url.render_as_string())
        create_tables()
    except SQLAlchemyError as exc:
        logger.error("[ensure_db] ERROR: %s", exc)
        return 1
    logger.info("[ensure_db] schema ready on %s", engine.url.render_as_string())
    return 0


if __name__ == "__main__":
    sys.exit(main())
