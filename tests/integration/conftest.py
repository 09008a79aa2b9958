import os
import sys

import pytest

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from catfolio import create_app
from catfolio.extensions import db
from catfolio.models.user import User
from catfolio.models.cat import Cat
from catfolio.models.photo import Photo


def _assert_memory_db(uri: str):
    if uri != "sqlite:///:memory:":
        raise RuntimeError(
            f"Refusing to run tests on non-memory DB: {uri!r}. "
            "This guard protects your real database."
        )


@pytest.fixture(scope="function")
def app():
    os.environ.pop("DATABASE_URL", None)

    flask_app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret-key",
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "LOG_LEVEL": "WARNING",
        }
    )

    _assert_memory_db(flask_app.config["SQLALCHEMY_DATABASE_URI"])

    with flask_app.app_context():
        db.create_all()
        yield flask_app
        _assert_memory_db(flask_app.config["SQLALCHEMY_DATABASE_URI"])
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def client(app):
    return app.test_client()

@pytest.fixture()
def make_user(app):
    counter = {"n": 0}

    def _make_user(username: str | None = None, email: str | None = None, **extra):
        counter["n"] += 1
        u = User(
            username=username or f"user{counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            **extra,
        )
        db.session.add(u)
        db.session.commit()
        return u
    return _make_user

@pytest.fixture()
def make_cat(app):
    def _make_cat(user: User, name: str = "Roshlyo", **extra):
        c = Cat(user_id=user.id, name=name, **extra)
        db.session.add(c)
        db.session.commit()
        return c
    return _make_cat

@pytest.fixture()
def make_photo(app):
    counter = {"n": 0}

    def _make_photo(cat: Cat, is_primary: bool = False, **extra):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "url": f"https://example.com/photo{n}.jpg",
            "filename": f"photo{n}.jpg",
            "file_size": 1024 * n,
            "mime_type": "image/jpeg",
        }
        fields.update(extra)
        p = Photo(cat_id=cat.id, is_primary=is_primary, **fields)
        db.session.add(p)
        db.session.commit()
        return p
    return _make_photo

@pytest.fixture()
def photo_fields():
    def _photo_fields(cat_id: int, n: int = 1, **extra):
        fields = {
            "cat_id": cat_id,
            "url": f"https://example.com/cats/{cat_id}/photo{n}.jpg",
            "filename": f"photo{n}.jpg",
            "file_size": 2048,
            "mime_type": "image/jpeg",
            "caption": None,
            "is_primary": False,
        }
        fields.update(extra)
        return fields
    return _photo_fields

@pytest.fixture()
def sample_data(app, make_user, make_cat, make_photo):
    owner = make_user("catowner", "owner@example.com", display_name="Cat Owner")
    other = make_user("neighbour", "neighbour@example.com")

    cat = make_cat(owner, "Fluffy", breed="Persian", age=3, description="A fluffy cat")
    p1 = make_photo(cat, is_primary=True, caption="Original caption")
    p2 = make_photo(cat, is_primary=False, mime_type="image/png")

    # plain ids: request teardown detaches ORM instances from the session
    return {
        "owner_id": owner.id,
        "other_id": other.id,
        "cat_id": cat.id,
        "photo_ids": [p1.id, p2.id],
    }

@pytest.fixture()
def file_app(tmp_path):
    # threads need a shared database; every :memory: connection is its own
    os.environ.pop("DATABASE_URL", None)
    uri = f"sqlite:///{tmp_path / 'catfolio-test.db'}"

    flask_app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret-key",
            "SQLALCHEMY_DATABASE_URI": uri,
            "LOG_LEVEL": "WARNING",
        }
    )
    if not flask_app.config["SQLALCHEMY_DATABASE_URI"].startswith(f"sqlite:///{tmp_path}"):
        raise RuntimeError("Refusing to run threaded tests outside tmp_path.")

    with flask_app.app_context():
        db.create_all()
        db.session.commit()

    yield flask_app

    with flask_app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
