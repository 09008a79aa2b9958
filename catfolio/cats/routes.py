from flask import Blueprint, jsonify
from flask_wtf import FlaskForm
from wtforms import IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional

from ..catalog import service
from ..catalog.changes import CatChanges
from ..forms import json_body, submitted, validate_json

cats_bp = Blueprint("cats", __name__)

CAT_FIELDS = ("name", "breed", "age", "description")


class CatForm(FlaskForm):
    name = StringField("Name", validators=[DataRequired(), Length(min=1, max=100)])
    breed = StringField("Breed", validators=[Optional(), Length(max=100)])
    age = IntegerField("Age (years)", validators=[Optional(), NumberRange(min=0, max=30)])
    description = TextAreaField("Description", validators=[Optional(), Length(max=500)])
    user_id = IntegerField("Owner", validators=[InputRequired()])


class CatUpdateForm(FlaskForm):
    name = StringField("Name", validators=[Optional(), Length(min=1, max=100)])
    breed = StringField("Breed", validators=[Optional(), Length(max=100)])
    age = IntegerField("Age (years)", validators=[Optional(), NumberRange(min=0, max=30)])
    description = TextAreaField("Description", validators=[Optional(), Length(max=500)])


@cats_bp.post("/cats")
def create_cat():
    payload = json_body()
    form = validate_json(CatForm, payload)
    fields = submitted(form, payload, ("breed", "age", "description"))
    fields["name"] = form.name.data.strip()
    fields["user_id"] = form.user_id.data
    cat = service.create_cat(fields)
    return jsonify(cat.to_dict()), 201


@cats_bp.get("/cats/<int:cat_id>")
def get_cat(cat_id):
    cat = service.get_cat_by_id(cat_id)
    return jsonify(cat.to_dict() if cat is not None else None)


@cats_bp.patch("/cats/<int:cat_id>")
def update_cat(cat_id):
    payload = json_body()
    form = validate_json(CatUpdateForm, payload, not_null=("name",))
    changes = CatChanges.from_mapping(submitted(form, payload, CAT_FIELDS))
    cat = service.update_cat(cat_id, changes)
    return jsonify(cat.to_dict())


@cats_bp.delete("/cats/<int:cat_id>")
def delete_cat(cat_id):
    return jsonify(service.delete_cat(cat_id))


@cats_bp.get("/cats/<int:cat_id>/photos")
def list_cat_photos(cat_id):
    photos = service.get_photos_by_cat(cat_id)
    return jsonify([p.to_dict() for p in photos])
