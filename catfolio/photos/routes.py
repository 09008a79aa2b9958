from flask import Blueprint, jsonify
from flask_wtf import FlaskForm
from wtforms import BooleanField, IntegerField, StringField, TextAreaField
from wtforms.fields import URLField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, URL

from ..catalog import service
from ..catalog.changes import PhotoChanges
from ..forms import json_body, submitted, validate_json

photos_bp = Blueprint("photos", __name__)


class PhotoForm(FlaskForm):
    cat_id = IntegerField("Cat", validators=[InputRequired()])
    url = URLField("Photo URL", validators=[DataRequired(), URL(message="Enter a valid URL")])
    filename = StringField("File name", validators=[DataRequired(), Length(max=255)])
    file_size = IntegerField("File size", validators=[InputRequired(), NumberRange(min=1)])
    mime_type = StringField("MIME type", validators=[DataRequired(), Length(max=50)])
    caption = TextAreaField("Caption", validators=[Optional(), Length(max=200)])
    is_primary = BooleanField("Primary photo", default=False)


class PhotoUpdateForm(FlaskForm):
    caption = TextAreaField("Caption", validators=[Optional(), Length(max=200)])
    is_primary = BooleanField("Primary photo")


@photos_bp.post("/photos")
def create_photo():
    payload = json_body()
    form = validate_json(PhotoForm, payload)
    fields = submitted(form, payload, ("caption",))
    fields.update(
        cat_id=form.cat_id.data,
        url=form.url.data.strip(),
        filename=form.filename.data.strip(),
        file_size=form.file_size.data,
        mime_type=form.mime_type.data.strip(),
        is_primary=bool(form.is_primary.data),
    )
    photo = service.create_photo(fields)
    return jsonify(photo.to_dict()), 201


@photos_bp.patch("/photos/<int:photo_id>")
def update_photo(photo_id):
    payload = json_body()
    form = validate_json(PhotoUpdateForm, payload, not_null=("is_primary",))
    changes = PhotoChanges.from_mapping(
        submitted(form, payload, ("caption", "is_primary"))
    )
    photo = service.update_photo(photo_id, changes)
    return jsonify(photo.to_dict())


@photos_bp.delete("/photos/<int:photo_id>")
def delete_photo(photo_id):
    return jsonify(service.delete_photo(photo_id))
