from datetime import datetime, timezone
from sqlalchemy import CheckConstraint
from ..extensions import db


class Cat(db.Model):
    __tablename__ = "cats"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = db.Column(db.String(100), nullable=False)
    breed = db.Column(db.String(100), nullable=True)
    age = db.Column(db.Integer, nullable=True)
    description = db.Column(db.Text, nullable=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        CheckConstraint(
            "age IS NULL OR (age >= 0 AND age <= 30)", name="ck_cat_age_range"
        ),
    )

    # fields a partial update may touch; user_id is a fixed back-reference
    MUTABLE_FIELDS = ("name", "breed", "age", "description")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "breed": self.breed,
            "age": self.age,
            "description": self.description,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Cat id={self.id} name={self.name!r} user_id={self.user_id}>"
