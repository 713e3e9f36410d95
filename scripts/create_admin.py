"""
Create (or promote) an active admin account.
Run: python -m scripts.create_admin --email admin@example.com --password '...'
"""
import argparse
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import load_settings
from app.core.roles import Role, AccountStatus
from app.db.init_db import init_db
from app.db.session import build_engine, build_session_factory
from app.services import account_service

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_admin(email: str, password: str, first_name: str, last_name: str) -> bool:
    settings = load_settings()
    engine = build_engine(settings.database_url)
    init_db(engine)
    db = build_session_factory(engine)()
    try:
        user = account_service.find_account_by_email(db, email)
        if user:
            logger.info(f"Found existing user: {email} (ID: {user.id}), promoting to active admin")
            account_service.update_status_and_role(db, user, AccountStatus.ACTIVE, Role.ADMIN)
            return True

        user = account_service.create_account(
            db,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=Role.ADMIN,
            status=AccountStatus.ACTIVE,
            bcrypt_rounds=settings.bcrypt_rounds,
        )
        logger.info(f"Created admin with ID: {user.id}")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create admin: {e}", exc_info=True)
        return False
    finally:
        db.close()
        engine.dispose()


def main() -> None:
    ap = argparse.ArgumentParser(description="Create or promote an admin account")
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--first-name", default="Admin")
    ap.add_argument("--last-name", default="Garoui")
    args = ap.parse_args()

    ok = create_admin(args.email, args.password, args.first_name, args.last_name)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
