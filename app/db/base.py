from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Models register themselves by importing Base from here; importing
# app.db.models (done by init_db and alembic/env.py) loads all of them.
