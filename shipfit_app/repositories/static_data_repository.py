from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from sqlalchemy import Float, ForeignKey, Integer, String, UniqueConstraint, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from .database import Base
from ..models import EntityType, SlotCategory, TypeCategory
from ..services.errors import NotFoundError


class EntityTypeORM(Base):
    __tablename__ = "entity_types"

    type_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    group_name: Mapped[str] = mapped_column(String(128), default="")
    slot: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    attributes: Mapped[List["TypeAttributeORM"]] = relationship(
        back_populates="entity_type", cascade="all, delete-orphan"
    )


class TypeAttributeORM(Base):
    __tablename__ = "type_attributes"
    __table_args__ = (UniqueConstraint("type_id", "name", name="uq_type_attribute"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type_id: Mapped[int] = mapped_column(ForeignKey("entity_types.type_id"), index=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    value: Mapped[float] = mapped_column(Float, default=0.0)

    entity_type: Mapped[EntityTypeORM] = relationship(back_populates="attributes")


def _to_entity(obj: EntityTypeORM) -> EntityType:
    return EntityType(
        type_id=obj.type_id,
        name=obj.name,
        category=TypeCategory(obj.category),
        group=obj.group_name or "",
        slot=SlotCategory(obj.slot) if obj.slot else None,
    )


class StaticDataRepository:
    """SQLite-backed attribute accessor for ship, module and item types."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def add_type(self, entity: EntityType, attributes: Mapping[str, float] | None = None) -> EntityType:
        obj = self._db.get(EntityTypeORM, entity.type_id)
        if obj is None:
            obj = EntityTypeORM(type_id=entity.type_id)
            self._db.add(obj)
        obj.name = entity.name
        obj.category = entity.category.value
        obj.group_name = entity.group
        obj.slot = entity.slot.value if entity.slot else None
        # Update rows in place; (type_id, name) is unique
        wanted = {k: float(v) for k, v in (attributes or {}).items()}
        existing = {a.name: a for a in obj.attributes}
        for name, row in existing.items():
            if name not in wanted:
                obj.attributes.remove(row)
        for name, value in wanted.items():
            if name in existing:
                existing[name].value = value
            else:
                obj.attributes.append(TypeAttributeORM(name=name, value=value))
        self._db.commit()
        return entity

    def get_entity_type(self, type_id: int) -> EntityType:
        obj = self._db.get(EntityTypeORM, type_id)
        if obj is None:
            raise NotFoundError(f"Type {type_id} not found in static data", type_id)
        return _to_entity(obj)

    def get_attribute(self, type_id: int, name: str, default: float = 0.0) -> float:
        if self._db.get(EntityTypeORM, type_id) is None:
            raise NotFoundError(f"Type {type_id} not found in static data", type_id)
        value = self._db.scalar(
            select(TypeAttributeORM.value).where(
                TypeAttributeORM.type_id == type_id, TypeAttributeORM.name == name
            )
        )
        return default if value is None else value

    def get_attributes(self, type_id: int) -> Dict[str, float]:
        obj = self._db.get(EntityTypeORM, type_id)
        if obj is None:
            raise NotFoundError(f"Type {type_id} not found in static data", type_id)
        return {a.name: a.value for a in obj.attributes}

    def list_types(self, category: TypeCategory | None = None) -> List[EntityType]:
        stmt = select(EntityTypeORM).order_by(EntityTypeORM.name)
        if category is not None:
            stmt = stmt.where(EntityTypeORM.category == category.value)
        return [_to_entity(obj) for obj in self._db.scalars(stmt).all()]

    def delete_type(self, type_id: int) -> None:
        obj = self._db.get(EntityTypeORM, type_id)
        if obj is None:
            return
        self._db.delete(obj)
        self._db.commit()
