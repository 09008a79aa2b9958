from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional


@dataclass
class CatWithPhotos:
    cat: Any
    photos: list = field(default_factory=list)

    @property
    def id(self):
        return self.cat.id

    def to_dict(self) -> dict:
        data = self.cat.to_dict()
        data["photos"] = [p.to_dict() for p in self.photos]
        return data


def primary_first_key(photo):
    return (bool(photo.is_primary), photo.created_at, photo.id)


def sort_primary_first(photos: Iterable) -> list:
    return sorted(photos, key=primary_first_key, reverse=True)


def group_cat_rows(
    rows: Iterable[tuple[Any, Optional[Any]]],
    photo_order: Optional[Callable[[list], list]] = None,
) -> list[CatWithPhotos]:
    # a cat whose photo side is None still yields an entry with no photos
    grouped: dict[Any, CatWithPhotos] = {}
    for cat, photo in rows:
        entry = grouped.get(cat.id)
        if entry is None:
            entry = grouped[cat.id] = CatWithPhotos(cat=cat)
        if photo is not None:
            entry.photos.append(photo)

    if photo_order is not None:
        for entry in grouped.values():
            entry.photos = photo_order(entry.photos)
    return list(grouped.values())
