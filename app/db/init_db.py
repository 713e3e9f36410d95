import logging
from sqlalchemy.engine import Engine

from app.db.base import Base
import app.db.models  # noqa: F401  (registers every model on Base.metadata)

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create missing tables. Local and test setups only; deployments run Alembic."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
