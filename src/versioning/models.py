"""Data models for versioning and update resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class UpdatePolicy(Enum):
    """How much of the version triple an update may change."""
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def parse(cls, value: str) -> "UpdatePolicy":
        """Case-insensitive lookup by value; raises ValueError when unknown."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown update type {value!r} (expected one of: {choices})") from None


@dataclass(frozen=True)
class DependencyRecord:
    """A dependency declared in a manifest."""
    name: str
    current_version: str


@dataclass(frozen=True)
class UpdateDecision:
    """A dependency with a newer admissible version."""
    name: str
    current_version: str
    new_version: str

    def to_dict(self) -> Dict[str, str]:
        """Serializable form; empty-string fields are omitted."""
        fields = {
            "include": self.name,
            "current_version": self.current_version,
            "new_version": self.new_version,
        }
        return {key: value for key, value in fields.items() if value != ""}
