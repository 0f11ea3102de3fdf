"""
Database initialization script.
Creates every table and, with --seed, a demo user plus a bearer token for it.
Run this as: python init_db.py [--seed]
"""

import argparse
import logging
import sys
import uuid

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("db-init")

from app.core.config import settings
from app.core.security import create_access_token
from app.db.init_db import create_all_tables
from app.db.session import SessionLocal
from app.modules.user_management.models.user import User

DEMO_USERNAME = "demo_founder"

def seed_demo_user() -> User:
    """Create the demo user once and return it"""
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.username == DEMO_USERNAME).first()
        if user:
            logger.info(f"Demo user already exists: {user.id}")
            return user
        user = User(
            id=str(uuid.uuid4()),
            email="founder@example.com",
            username=DEMO_USERNAME,
            first_name="Demo",
            last_name="Founder",
            is_active=True,
            is_verified=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Created demo user: {user.id}")
        return user
    finally:
        db.close()

def main():
    parser = argparse.ArgumentParser(description="Create database tables")
    parser.add_argument("--seed", action="store_true", help="Create a demo user and print a token for it")
    args = parser.parse_args()

    logger.info(f"Initializing database at: {settings.DATABASE_URL}")
    if not create_all_tables():
        logger.error("Database initialization failed")
        sys.exit(1)
    logger.info("Database initialization completed successfully")

    if args.seed:
        user = seed_demo_user()
        print(f"Bearer token for {user.username}: {create_access_token(user.id)}")

if __name__ == "__main__":
    main()
