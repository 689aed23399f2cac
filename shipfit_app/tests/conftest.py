"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path

import pytest

# Ensure project root is on path when running tests
_project_root = Path(__file__).resolve().parents[2]
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from shipfit_app.models import CargoItem, Character, Fitting, ModuleEntry, SkillRecord, SlotCategory
from shipfit_app.tests import sample_data as sd


@pytest.fixture
def temp_db():
    """Create a temporary SQLite database and return its path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    try:
        path.unlink(missing_ok=True)
    except OSError:
        pass  # Windows may hold file; ignore cleanup failure


@pytest.fixture
def db_session(temp_db):
    """Provide a database session with initialized schema."""
    from sqlalchemy import create_engine
    from shipfit_app.repositories.database import Base
    from shipfit_app.repositories.static_data_repository import EntityTypeORM, TypeAttributeORM  # noqa: F401

    engine = create_engine(f"sqlite:///{temp_db}", future=True)
    Base.metadata.create_all(bind=engine)
    from sqlalchemy.orm import sessionmaker
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store():
    """In-memory attribute store loaded with the sample catalog."""
    return sd.build_store()


@pytest.fixture
def sample_fitting():
    """A valid Rifter fit: three autocannons, shield tank, afterburner, drones and cargo."""
    return Fitting(
        id=1,
        name="Rifter PvP",
        ship_type_id=sd.RIFTER,
        character_id=7,
        high_slots=[ModuleEntry(sd.AUTOCANNON, SlotCategory.HIGH, quantity=3, charge_type_id=sd.EMP_S)],
        medium_slots=[
            ModuleEntry(sd.SHIELD_EXTENDER, SlotCategory.MEDIUM),
            ModuleEntry(sd.SHIELD_HARDENER, SlotCategory.MEDIUM),
            ModuleEntry(sd.AFTERBURNER, SlotCategory.MEDIUM),
        ],
        low_slots=[
            ModuleEntry(sd.GYROSTABILIZER, SlotCategory.LOW, quantity=2),
            ModuleEntry(sd.DAMAGE_CONTROL, SlotCategory.LOW),
        ],
        rig_slots=[ModuleEntry(sd.DEFENSE_RIG, SlotCategory.RIG)],
        drones=[ModuleEntry(sd.HOBGOBLIN, SlotCategory.DRONE, quantity=2)],
        cargo=[CargoItem(sd.TRITANIUM, 100)],
    )


@pytest.fixture
def empty_fitting():
    return Fitting(id=2, name="Empty hull", ship_type_id=sd.RIFTER, character_id=7)


@pytest.fixture
def skilled_character():
    """Pilot with a typical spread of support skills."""
    levels = {
        3426: 5,  # CPU Management
        3413: 5,  # Power Grid Management
        3418: 4,  # Capacitor Management
        3419: 5,  # Shield Management
        3449: 5,  # Navigation
        3453: 3,  # Evasive Maneuvering
        3327: 4,  # Spaceship Command
        3428: 4,  # Long Range Targeting
        3431: 5,  # Signature Analysis
        3429: 3,  # Target Management
        3300: 5,  # Gunnery
        3310: 4,  # Rapid Firing
        3315: 4,  # Surgical Strike
        3442: 5,  # Drone Interfacing
    }
    return Character.from_records(7, "Test Pilot", [SkillRecord(skill_id, level) for skill_id, level in levels.items()])
