from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..errors import ConstraintViolation, NotFound
from ..extensions import db
from ..models.cat import Cat
from ..models.photo import Photo
from ..models.user import User
from .changes import CatChanges, PhotoChanges

logger = logging.getLogger(__name__)

USER_FIELDS = ("username", "email", "display_name", "avatar_url")
CAT_FIELDS = ("name", "breed", "age", "description", "user_id")
PHOTO_FIELDS = (
    "cat_id",
    "url",
    "filename",
    "file_size",
    "mime_type",
    "caption",
    "is_primary",
)


@contextmanager
def unit_of_work() -> Iterator[Any]:
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def _pick(fields: Mapping[str, Any], allowed: tuple[str, ...]) -> dict[str, Any]:
    return {k: fields[k] for k in allowed if k in fields}


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_cat(cat_id: int) -> Optional[Cat]:
    return db.session.get(Cat, cat_id)


def get_photo(photo_id: int) -> Optional[Photo]:
    return db.session.get(Photo, photo_id)


def require_user(user_id: int) -> User:
    user = get_user(user_id)
    if user is None:
        raise NotFound("user", user_id)
    return user


def require_cat(cat_id: int) -> Cat:
    cat = get_cat(cat_id)
    if cat is None:
        raise NotFound("cat", cat_id)
    return cat


def require_photo(photo_id: int) -> Photo:
    photo = get_photo(photo_id)
    if photo is None:
        raise NotFound("photo", photo_id)
    return photo


def lock_cat(cat_id: int) -> bool:
    # no row locks on SQLite; its database-wide write lock serializes writers
    stmt = select(Cat.id).where(Cat.id == cat_id).with_for_update()
    return db.session.execute(stmt).scalar_one_or_none() is not None


def insert_user(fields: Mapping[str, Any]) -> User:
    values = _pick(fields, USER_FIELDS)
    for unique_field in ("username", "email"):
        value = values.get(unique_field)
        taken = db.session.execute(
            select(User.id).where(getattr(User, unique_field) == value)
        ).first()
        if taken:
            raise ConstraintViolation(unique_field, value)

    user = User(**values)
    db.session.add(user)
    try:
        # a concurrent insert can still win the race past the checks above
        db.session.flush()
    except IntegrityError as exc:
        field = "email" if "email" in str(exc.orig).lower() else "username"
        raise ConstraintViolation(field, values.get(field)) from exc
    return user


def insert_cat(fields: Mapping[str, Any]) -> Cat:
    values = _pick(fields, CAT_FIELDS)
    require_user(values.get("user_id"))
    cat = Cat(**values)
    db.session.add(cat)
    db.session.flush()
    return cat


def insert_photo(fields: Mapping[str, Any]) -> Photo:
    values = _pick(fields, PHOTO_FIELDS)
    require_cat(values.get("cat_id"))
    values["is_primary"] = bool(values.get("is_primary", False))
    photo = Photo(**values)
    db.session.add(photo)
    db.session.flush()
    return photo


def update_cat(cat_id: int, changes: CatChanges) -> Cat:
    cat = require_cat(cat_id)
    supplied = changes.supplied()
    if not supplied:
        return cat
    for key, value in supplied.items():
        if key in Cat.MUTABLE_FIELDS:
            setattr(cat, key, value)
    db.session.flush()
    return cat


def update_photo(photo_id: int, changes: PhotoChanges) -> Photo:
    photo = require_photo(photo_id)
    supplied = changes.supplied()
    if not supplied:
        return photo
    for key, value in supplied.items():
        if key in Photo.MUTABLE_FIELDS:
            setattr(photo, key, value)
    db.session.flush()
    return photo


def delete_cat(cat_id: int) -> int:
    cat = require_cat(cat_id)
    removed = Photo.query.filter(Photo.cat_id == cat_id).delete(
        synchronize_session="evaluate"
    )
    db.session.delete(cat)
    db.session.flush()
    return removed


def delete_photo(photo_id: int) -> bool:
    photo = get_photo(photo_id)
    if photo is None:
        return False
    db.session.delete(photo)
    db.session.flush()
    return True


def cat_photo_rows(*criteria, order_by=()):
    query = (
        db.session.query(Cat, Photo)
        .outerjoin(Photo, Photo.cat_id == Cat.id)
        .filter(*criteria)
    )
    if order_by:
        query = query.order_by(*order_by)
    return query.all()


def photos_for_cat(cat_id: int) -> list[Photo]:
    return (
        Photo.query.filter_by(cat_id=cat_id)
        .order_by(Photo.is_primary.desc(), Photo.created_at.desc(), Photo.id.desc())
        .all()
    )
