import pytest
from sqlalchemy import delete, event

from catfolio.catalog import service
from catfolio.catalog.changes import CatChanges
from catfolio.errors import NotFound
from catfolio.extensions import db
from catfolio.models.cat import Cat
from catfolio.models.photo import Photo
from catfolio.models.user import User


def test_create_cat(app, make_user):
    owner = make_user()
    cat = service.create_cat(
        {"name": "Fluffy", "breed": "Persian", "age": 3, "description": None, "user_id": owner.id}
    )
    assert cat.id is not None
    assert cat.user_id == owner.id
    assert cat.breed == "Persian"
    assert cat.description is None

def test_create_cat_unknown_user(app):
    with pytest.raises(NotFound) as exc_info:
        service.create_cat({"name": "Ghost", "user_id": 999})
    assert exc_info.value.entity == "user"
    assert exc_info.value.entity_id == 999
    assert "999" in str(exc_info.value)
    assert Cat.query.count() == 0

def test_update_cat_only_supplied_fields(app, sample_data):
    cat_id = sample_data["cat_id"]
    cat = service.update_cat(cat_id, CatChanges(name="Sir Fluffington"))
    assert cat.name == "Sir Fluffington"
    assert cat.breed == "Persian"
    assert cat.age == 3
    assert cat.description == "A fluffy cat"

def test_update_cat_null_clears_nullable_field(app, sample_data):
    cat = service.update_cat(sample_data["cat_id"], CatChanges(breed=None, age=None))
    assert cat.breed is None
    assert cat.age is None
    assert cat.name == "Fluffy"

def test_update_cat_without_fields_does_not_write(app, sample_data):
    cat_id = sample_data["cat_id"]
    before = service.get_cat_by_id(cat_id).to_dict()

    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(db.engine, "before_cursor_execute", _record)
    try:
        cat = service.update_cat(cat_id, CatChanges())
    finally:
        event.remove(db.engine, "before_cursor_execute", _record)

    assert cat.id == cat_id
    assert not [s for s in statements if s.lstrip().upper().startswith("UPDATE")]
    assert service.get_cat_by_id(cat_id).to_dict() == before

def test_update_cat_keeps_owner(app, sample_data):
    cat = service.update_cat(
        sample_data["cat_id"], CatChanges.from_mapping({"user_id": sample_data["other_id"]})
    )
    assert cat.user_id == sample_data["owner_id"]

def test_update_missing_cat(app):
    with pytest.raises(NotFound) as exc_info:
        service.update_cat(4242, CatChanges(name="Nobody"))
    assert exc_info.value.entity == "cat"

def test_delete_cat_cascades_photos(app, sample_data):
    cat_id = sample_data["cat_id"]
    assert Photo.query.filter_by(cat_id=cat_id).count() == 2

    result = service.delete_cat(cat_id)

    assert result == {"success": True}
    assert db.session.get(Cat, cat_id) is None
    assert Photo.query.filter_by(cat_id=cat_id).count() == 0

@pytest.mark.parametrize("n_photos", [0, 1, 5])
def test_delete_cat_leaves_no_photos(app, make_user, make_cat, make_photo, n_photos):
    owner = make_user()
    cat = make_cat(owner)
    keep = make_cat(owner, "Keeper")
    for i in range(n_photos):
        make_photo(cat, is_primary=(i == 0))
    make_photo(keep)
    cat_id, keep_id = cat.id, keep.id

    service.delete_cat(cat_id)

    assert Photo.query.filter_by(cat_id=cat_id).count() == 0
    assert Photo.query.filter_by(cat_id=keep_id).count() == 1

def test_delete_missing_cat_raises(app):
    with pytest.raises(NotFound) as exc_info:
        service.delete_cat(12345)
    assert exc_info.value.entity_id == 12345

def test_get_cat_by_id_missing_returns_none(app):
    assert service.get_cat_by_id(777) is None

def test_get_cat_by_id_with_photos(app, sample_data):
    view = service.get_cat_by_id(sample_data["cat_id"])
    assert view.id == sample_data["cat_id"]
    assert [p.id for p in view.photos] == sample_data["photo_ids"]
    data = view.to_dict()
    assert data["name"] == "Fluffy"
    assert len(data["photos"]) == 2

def test_get_cat_by_id_without_photos(app, make_user, make_cat):
    cat = make_cat(make_user(), "Lonely")
    view = service.get_cat_by_id(cat.id)
    assert view.photos == []
    assert view.to_dict()["photos"] == []

def test_deleting_owner_row_cascades_in_database(app, sample_data):
    db.session.execute(delete(User).where(User.id == sample_data["owner_id"]))
    db.session.commit()

    assert db.session.get(Cat, sample_data["cat_id"]) is None
    assert Photo.query.filter_by(cat_id=sample_data["cat_id"]).count() == 0
