#This file is responsible for opening a connection to the employee database
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from safescan.config import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind=None):
    # models must be imported so their tables are registered on Base
    from safescan import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)


def get_db():  # pragma: no cover
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
