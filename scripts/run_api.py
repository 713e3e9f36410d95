import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import uvicorn

from app.core.config import load_settings
from app.db.migrate import run_migrations


def main() -> None:
    # Fails fast when SECRET_KEY is missing
    settings = load_settings()

    if os.environ.get("RUN_MIGRATIONS") == "1":
        run_migrations(settings.database_url)

    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("API_PORT", "3000"))
    uvicorn.run("app.main:create_app", factory=True, host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
