from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import update

from ..errors import NotFound
from ..extensions import db
from ..models.photo import Photo
from . import store

logger = logging.getLogger(__name__)


def clear_other_primaries(cat_id: int, keep_photo_id: Optional[int] = None) -> int:
    """Unset ``is_primary`` on every photo of ``cat_id`` except ``keep_photo_id``; returns how many lost it."""
    if not store.lock_cat(cat_id):
        raise NotFound("cat", cat_id)

    stmt = (
        update(Photo)
        .where(Photo.cat_id == cat_id, Photo.is_primary == True)  # noqa: E712
        .values(is_primary=False)
        .execution_options(synchronize_session="evaluate")
    )
    if keep_photo_id is not None:
        stmt = stmt.where(Photo.id != keep_photo_id)

    cleared = db.session.execute(stmt).rowcount
    if cleared:
        logger.info("Cleared primary flag on %d photo(s) of cat %s", cleared, cat_id)
    return cleared


def primary_count(cat_id: Optional[int] = None) -> int:
    query = Photo.query.filter_by(is_primary=True)
    if cat_id is not None:
        query = query.filter_by(cat_id=cat_id)
    return query.count()
