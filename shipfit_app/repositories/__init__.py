"""
Repository layer for static type data (SQLite via SQLAlchemy).
"""

from shipfit_app.repositories.database import SessionLocal, Base, init_database
from shipfit_app.repositories.static_data_repository import StaticDataRepository

__all__ = [
    "SessionLocal",
    "Base",
    "init_database",
    "StaticDataRepository",
]
