from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class _Changes:
    def supplied(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.supplied()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]):
        # unknown keys are ignored
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass(frozen=True)
class CatChanges(_Changes):
    name: Any = UNSET
    breed: Any = UNSET
    age: Any = UNSET
    description: Any = UNSET


@dataclass(frozen=True)
class PhotoChanges(_Changes):
    caption: Any = UNSET
    is_primary: Any = UNSET
