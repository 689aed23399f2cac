"""
Read-only access to static type attributes.

The engine never owns catalog data; it reads it through an accessor that may
be synchronous (in-memory dicts, a SQLAlchemy session) or asynchronous (a
remote-backed cache). `AttributeReader` hides the difference from the
calculators.
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Dict, Iterable, Mapping, Protocol, Tuple, TypeVar, Union

from shipfit_app.models import EntityType, TypeCategory
from shipfit_app.services.errors import NotFoundError

T = TypeVar("T")
MaybeAwaitable = Union[T, Awaitable[T]]


class AttributeAccessor(Protocol):
    """Lookup of static type data; unknown type ids raise NotFoundError."""

    def get_attribute(self, type_id: int, name: str, default: float = 0.0) -> MaybeAwaitable[float]:
        ...

    def get_entity_type(self, type_id: int) -> MaybeAwaitable[EntityType]:
        ...


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class AttributeReader:
    """Async facade over any AttributeAccessor."""

    def __init__(self, accessor: AttributeAccessor) -> None:
        self._accessor = accessor

    @property
    def accessor(self) -> AttributeAccessor:
        return self._accessor

    async def entity(self, type_id: int) -> EntityType:
        return await _resolve(self._accessor.get_entity_type(type_id))

    async def attr(self, type_id: int, name: str, default: float = 0.0) -> float:
        return float(await _resolve(self._accessor.get_attribute(type_id, name, default)))

    async def attrs(self, type_id: int, names: Mapping[str, float]) -> Dict[str, float]:
        """Read several attributes; `names` maps attribute name -> default."""
        return {name: await self.attr(type_id, name, default) for name, default in names.items()}

    async def expect(self, type_id: int, category: TypeCategory, what: str) -> EntityType:
        """Resolve a type and require it to belong to `category`."""
        entity = await self.entity(type_id)
        if entity.category is not category:
            raise NotFoundError(
                f"{what} type {type_id} is a {entity.category.value}, not a {category.value}",
                type_id,
            )
        return entity


class InMemoryAttributeStore:
    """Dict-backed accessor. Reads only; safe to share between concurrent tasks."""

    def __init__(
        self,
        types: Iterable[Tuple[EntityType, Mapping[str, float]]] = (),
    ) -> None:
        self._types: Dict[int, EntityType] = {}
        self._attributes: Dict[int, Dict[str, float]] = {}
        for entity, attributes in types:
            self.add(entity, attributes)

    def add(self, entity: EntityType, attributes: Mapping[str, float] | None = None) -> None:
        self._types[entity.type_id] = entity
        self._attributes[entity.type_id] = {k: float(v) for k, v in (attributes or {}).items()}

    def get_entity_type(self, type_id: int) -> EntityType:
        entity = self._types.get(type_id)
        if entity is None:
            raise NotFoundError(f"Type {type_id} not found in attribute store", type_id)
        return entity

    def get_attribute(self, type_id: int, name: str, default: float = 0.0) -> float:
        if type_id not in self._attributes:
            raise NotFoundError(f"Type {type_id} not found in attribute store", type_id)
        return self._attributes[type_id].get(name, default)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._types

    def __len__(self) -> int:
        return len(self._types)
