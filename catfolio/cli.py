from __future__ import annotations

import random

import click
from flask import current_app
from sqlalchemy import text

from .extensions import db

from .catalog import primary, service
from .models.user import User
from .models.cat import Cat
from .models.photo import Photo


def _db_uri() -> str:
    return current_app.config.get("SQLALCHEMY_DATABASE_URI", "")

@click.command("init-db")
def init_db_cmd():
    uri = _db_uri()
    click.echo(f"Creating tables on DB: {uri}")
    db.create_all()
    click.echo("✔ Tables created.")

@click.command("reset-db")
@click.option("--force", is_flag=True, help="Drop + create (irreversible).")
def reset_db_cmd(force: bool):
    uri = _db_uri()
    if not force:
        click.echo("Add --force to confirm dropping all tables.")
        return
    click.echo(f"Dropping & creating tables on DB: {uri}")
    db.drop_all()
    db.create_all()
    click.echo("✔ Database reset.")

@click.command("purge-data")
def purge_data_cmd():
    db.session.query(Photo).delete()
    db.session.query(Cat).delete()
    db.session.query(User).delete()
    db.session.commit()
    if _db_uri().startswith("sqlite:"):
        has_sequence = db.session.execute(
            text("SELECT name FROM sqlite_master WHERE name = 'sqlite_sequence'")
        ).first()
        if has_sequence:
            db.session.execute(text("DELETE FROM sqlite_sequence"))
            db.session.commit()
    click.echo("✔ All data removed (schema kept).")

def _photo_fields(cat_id: int, n: int, is_primary: bool) -> dict:
    ext, mime = random.choice([("jpg", "image/jpeg"), ("png", "image/png"), ("webp", "image/webp")])
    return {
        "cat_id": cat_id,
        "url": f"https://picsum.photos/seed/cat{cat_id}-{n}/640/480.{ext}",
        "filename": f"cat{cat_id}_{n}.{ext}",
        "file_size": random.randint(40_000, 2_500_000),
        "mime_type": mime,
        "caption": random.choice([None, "Sunbathing", "Nap time", "Caught mid-yawn", "Box inspector"]),
        "is_primary": is_primary,
    }

@click.command("seed-demo")
def seed_demo_cmd():
    owner = service.create_user(
        {"username": "demo", "email": "demo@catfolio.dev", "display_name": "Demo Owner"}
    )

    maca = service.create_cat(
        {"name": "Maca", "breed": "Mix", "age": 3, "description": "Sleeps on keyboards.", "user_id": owner.id}
    )
    service.create_photo(_photo_fields(maca.id, 1, is_primary=True))
    service.create_photo(_photo_fields(maca.id, 2, is_primary=False))

    service.create_cat(
        {"name": "Roshlyo", "breed": "Street Queen", "age": 7, "user_id": owner.id}
    )

    click.echo("✔ Seed done. User: demo (demo@catfolio.dev), cats: Maca (2 photos), Roshlyo")

FIRST_NAMES = [
    "Alex", "Mira", "Daniel", "Eva", "Ivo", "Nina", "Chris", "Maria", "Petar", "Georgi",
    "Viktor", "Sofia", "Ani", "Stoyan", "Kalina", "Toma", "Raya", "Mila", "Rumen", "Teo",
]

CAT_NAMES = [
    "Maca", "Luna", "Simba", "Molly", "Kaya", "Pufi", "Tara", "Miro", "Sisi", "Tiger", "Nala", "Oscar",
]

BREEDS = [
    "Domestic Shorthair", "British Shorthair", "Siamese", "Maine Coon", "Persian",
    "Ragdoll", "Sphynx", "Bengal", None,
]

def _seed_bulk(
    users: int,
    cats_per_user_min: int,
    cats_per_user_max: int,
    photos_per_cat_min: int,
    photos_per_cat_max: int,
) -> None:
    random.seed(42)
    click.echo(f"Seeding on DB: {_db_uri()}")

    total_cats = 0
    total_photos = 0
    for i in range(users):
        first = random.choice(FIRST_NAMES)
        user = service.create_user(
            {
                "username": f"{first.lower()}{i:03d}",
                "email": f"user{i:03d}@catfolio.dev",
                "display_name": first,
            }
        )
        for _ in range(random.randint(cats_per_user_min, cats_per_user_max)):
            cat = service.create_cat(
                {
                    "name": random.choice(CAT_NAMES),
                    "breed": random.choice(BREEDS),
                    "age": random.randint(0, 20),
                    "user_id": user.id,
                }
            )
            total_cats += 1
            for n in range(random.randint(photos_per_cat_min, photos_per_cat_max)):
                # later primaries displace earlier ones
                service.create_photo(_photo_fields(cat.id, n, is_primary=random.random() < 0.4))
                total_photos += 1

    primaries = primary.primary_count()
    click.echo(
        "✔ Seed completed:\n"
        f"  Users: {users}\n"
        f"  Cats: {total_cats}\n"
        f"  Photos: {total_photos} (primary: {primaries})"
    )

@click.command("seed-small")
@click.option("--users", default=10, show_default=True, help="Number of users.")
@click.option("--cats-per-user-min", default=0, show_default=True, help="Min cats per user.")
@click.option("--cats-per-user-max", default=3, show_default=True, help="Max cats per user.")
@click.option("--photos-per-cat-min", default=0, show_default=True, help="Min photos per cat.")
@click.option("--photos-per-cat-max", default=4, show_default=True, help="Max photos per cat.")
def seed_small_cmd(
    users: int,
    cats_per_user_min: int,
    cats_per_user_max: int,
    photos_per_cat_min: int,
    photos_per_cat_max: int,
):
    _seed_bulk(users, cats_per_user_min, cats_per_user_max, photos_per_cat_min, photos_per_cat_max)
