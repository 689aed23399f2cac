"""
SQLAlchemy database setup for the static type/attribute store.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


class Base(DeclarativeBase):
    """Base declarative class for ORM models."""

    pass


# Will be assigned a sessionmaker instance by init_database
SessionLocal: sessionmaker | None = None


def init_database(db_path: Path, echo: bool = False) -> sessionmaker:
    """
    Create the static-data schema in `db_path` and bind SessionLocal to it.

    Safe to call on an existing file; tables that already exist are kept.
    """
    # Import ORM models so their metadata is registered on Base
    from .static_data_repository import EntityTypeORM, TypeAttributeORM  # noqa: F401

    engine = create_engine(f"sqlite:///{db_path}", future=True, echo=echo)
    Base.metadata.create_all(bind=engine)

    global SessionLocal
    SessionLocal = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        future=True,
    )
    return SessionLocal
