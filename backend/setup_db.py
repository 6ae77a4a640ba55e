#!/usr/bin/env python3
"""
Database setup script for TradeJournal

This script creates the TradeJournal tables and, optionally, an admin user.
"""

import argparse
import logging
import sys

import tradejournal.models  # noqa: F401
from tradejournal.core.config import settings
from tradejournal.db.base import Base
from tradejournal.db.session import SessionLocal, make_engine
from tradejournal.repositories.user import UserRepository
from tradejournal.schemas.user import UserCreate

logger = logging.getLogger("setup_db")


def create_tables(engine):
    """Create every table that does not exist yet"""
    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


def create_admin(db, email, username, password):
    """Create an admin user, or promote the existing user with that email"""
    repository = UserRepository(db)
    user = repository.get_by_email(email)
    if user:
        if user.role != "admin":
            user = repository.update(db_obj=user, obj_in={"role": "admin"})
            logger.info(f"Promoted {email} to admin")
        else:
            logger.info(f"Admin {email} already exists")
        return user

    user = repository.create(
        obj_in=UserCreate(email=email, username=username, password=password), role="admin"
    )
    logger.info(f"Admin {email} created")
    return user


def main(argv=None):
    parser = argparse.ArgumentParser(description="Set up the TradeJournal database")
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy database URL")
    parser.add_argument("--admin-email", help="Create or promote an admin with this email")
    parser.add_argument("--admin-username", default="admin", help="Username for a new admin")
    parser.add_argument("--admin-password", help="Password for a new admin")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    engine = make_engine(args.database_url)
    create_tables(engine)

    if args.admin_email:
        db = SessionLocal(bind=engine)
        try:
            existing = UserRepository(db).get_by_email(args.admin_email)
            if not existing and not args.admin_password:
                logger.error("--admin-password is required to create a new admin")
                return 1
            create_admin(db, args.admin_email, args.admin_username, args.admin_password)
        finally:
            db.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
