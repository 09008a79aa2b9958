from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..models.cat import Cat
from ..models.photo import Photo
from ..models.user import User
from . import primary, store
from .changes import CatChanges, PhotoChanges
from .projection import CatWithPhotos, group_cat_rows, sort_primary_first

logger = logging.getLogger(__name__)


def create_user(fields: Mapping[str, Any]) -> User:
    with store.unit_of_work():
        user = store.insert_user(fields)
    logger.info("Created user %s (%s)", user.id, user.username)
    return user


def create_cat(fields: Mapping[str, Any]) -> Cat:
    with store.unit_of_work():
        cat = store.insert_cat(fields)
    logger.info("Created cat %s for user %s", cat.id, cat.user_id)
    return cat


def create_photo(fields: Mapping[str, Any]) -> Photo:
    cat_id = fields.get("cat_id")
    with store.unit_of_work():
        store.require_cat(cat_id)
        if fields.get("is_primary"):
            primary.clear_other_primaries(cat_id)
        photo = store.insert_photo(fields)
    logger.info("Created photo %s for cat %s (primary=%s)", photo.id, cat_id, photo.is_primary)
    return photo


def update_cat(cat_id: int, changes: CatChanges) -> Cat:
    with store.unit_of_work():
        cat = store.update_cat(cat_id, changes)
    if not changes.is_empty():
        logger.info("Updated cat %s: %s", cat_id, sorted(changes.supplied()))
    return cat


def update_photo(photo_id: int, changes: PhotoChanges) -> Photo:
    with store.unit_of_work():
        if changes.is_primary is True:
            photo = store.require_photo(photo_id)
            primary.clear_other_primaries(photo.cat_id, keep_photo_id=photo.id)
        photo = store.update_photo(photo_id, changes)
    if not changes.is_empty():
        logger.info("Updated photo %s: %s", photo_id, sorted(changes.supplied()))
    return photo


def delete_cat(cat_id: int) -> dict:
    with store.unit_of_work():
        removed = store.delete_cat(cat_id)
    logger.info("Deleted cat %s and %d photo(s)", cat_id, removed)
    return {"success": True}


def delete_photo(photo_id: int) -> dict:
    with store.unit_of_work():
        deleted = store.delete_photo(photo_id)
    if deleted:
        logger.info("Deleted photo %s", photo_id)
    return {"success": deleted}


def get_cat_by_id(cat_id: int) -> Optional[CatWithPhotos]:
    rows = store.cat_photo_rows(Cat.id == cat_id, order_by=(Photo.id.asc(),))
    grouped = group_cat_rows(rows)
    return grouped[0] if grouped else None


def get_cats_by_user(user_id: int) -> list[CatWithPhotos]:
    rows = store.cat_photo_rows(
        Cat.user_id == user_id,
        order_by=(Cat.created_at.desc(), Cat.id.desc(), Photo.id.asc()),
    )
    return group_cat_rows(rows, photo_order=sort_primary_first)


def get_photos_by_cat(cat_id: int) -> list[Photo]:
    return store.photos_for_cat(cat_id)
