import logging
import os
import sys

from flask_migrate import upgrade
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError

from . import app, init_db

logger = logging.getLogger(__name__)


def check_connection(database_url):
    try:
        engine = create_engine(database_url)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
        return True
    except OperationalError as e:
        logger.error(f"Database connection failed: {e}")
        return False


def apply_schema(migrations_dir="migrations"):
    with app.app_context():
        if os.path.isdir(migrations_dir):
            upgrade(directory=migrations_dir)
            logger.info("Database migrations applied successfully")
        else:
            init_db()
            logger.info(f"No {migrations_dir}/ directory, created tables from models")


def main():
    if not check_connection(app.config["SQLALCHEMY_DATABASE_URI"]):
        return 1
    try:
        apply_schema()
    except Exception as e:
        logger.error(f"Failed to apply migrations: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
