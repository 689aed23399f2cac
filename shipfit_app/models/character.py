from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable

from shipfit_app.config.limits import MAX_SKILL_LEVEL


@dataclass(frozen=True, slots=True)
class SkillRecord:
    skill_id: int
    level: int = 0
    skill_points: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.level, bool) or not isinstance(self.level, int):
            raise ValueError(f"Skill level must be an integer, got {self.level!r}")
        if not 0 <= self.level <= MAX_SKILL_LEVEL:
            raise ValueError(f"Skill level must be between 0 and {MAX_SKILL_LEVEL}, got {self.level}")
        if self.skill_points < 0:
            raise ValueError("Skill points cannot be negative.")


@dataclass(slots=True)
class Character:
    """Read-only skill snapshot of a pilot."""

    id: int | None = None
    name: str = ""
    skills: Dict[int, SkillRecord] = field(default_factory=dict)

    @classmethod
    def from_records(cls, id: int | None, name: str, records: Iterable[SkillRecord]) -> "Character":
        return cls(id=id, name=name, skills={r.skill_id: r for r in records})

    def skill_level(self, skill_id: int) -> int:
        record = self.skills.get(skill_id)
        return record.level if record else 0
