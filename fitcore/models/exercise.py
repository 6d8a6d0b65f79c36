from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ExerciseCatalogEntry:
    """Reference data from the third-party exercise catalog."""

    id: str
    name: str
    body_part: str = ""
    target: str = ""
    equipment: str = ""
    gif_url: Optional[str] = None
    secondary_muscles: Tuple[str, ...] = field(default_factory=tuple)
    instructions: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ExerciseCatalogEntry":
        """Build an entry from an ExerciseDB-style JSON object."""
        return cls(
            id=str(payload.get("id", "")),
            name=str(payload.get("name", "")),
            body_part=str(payload.get("bodyPart") or payload.get("body_part") or ""),
            target=str(payload.get("target") or ""),
            equipment=str(payload.get("equipment") or ""),
            gif_url=payload.get("gifUrl") or payload.get("gif_url"),
            secondary_muscles=tuple(payload.get("secondaryMuscles") or payload.get("secondary_muscles") or ()),
            instructions=tuple(payload.get("instructions") or ()),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "bodyPart": self.body_part,
            "target": self.target,
            "equipment": self.equipment,
            "gifUrl": self.gif_url,
            "secondaryMuscles": list(self.secondary_muscles),
            "instructions": list(self.instructions),
        }
