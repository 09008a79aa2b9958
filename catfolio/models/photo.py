from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, text
from ..extensions import db


class Photo(db.Model):
    __tablename__ = "photos"

    id = db.Column(db.Integer, primary_key=True)
    cat_id = db.Column(
        db.Integer,
        db.ForeignKey("cats.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    url = db.Column(db.Text, nullable=False)
    filename = db.Column(db.String(255), nullable=False)
    file_size = db.Column(db.Integer, nullable=False)
    mime_type = db.Column(db.String(50), nullable=False)
    caption = db.Column(db.Text, nullable=True)
    is_primary = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(
        db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        CheckConstraint("file_size > 0", name="ck_photo_file_size_positive"),
        # at most one primary photo per cat
        db.Index(
            "uq_photos_primary_per_cat",
            "cat_id",
            unique=True,
            sqlite_where=text("is_primary = 1"),
            postgresql_where=text("is_primary"),
        ),
    )

    MUTABLE_FIELDS = ("caption", "is_primary")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cat_id": self.cat_id,
            "url": self.url,
            "filename": self.filename,
            "file_size": self.file_size,
            "mime_type": self.mime_type,
            "caption": self.caption,
            "is_primary": bool(self.is_primary),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return (
            f"<Photo id={self.id} cat_id={self.cat_id} is_primary={self.is_primary}>"
        )
