from flask import Blueprint, jsonify
from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.fields import EmailField, URLField
from wtforms.validators import DataRequired, Email, Length, Optional, URL

from ..catalog import service
from ..forms import json_body, submitted, validate_json

users_bp = Blueprint("users", __name__)


class RegisterForm(FlaskForm):
    username = StringField("Username", validators=[DataRequired(), Length(min=3, max=50)])
    email = EmailField("Email", validators=[DataRequired(), Email()])
    display_name = StringField("Display name", validators=[Optional(), Length(max=100)])
    avatar_url = URLField(
        "Avatar URL", validators=[Optional(), URL(message="Enter a valid URL")]
    )


@users_bp.post("/users")
def create_user():
    payload = json_body()
    form = validate_json(RegisterForm, payload)
    fields = submitted(form, payload, ("display_name", "avatar_url"))
    fields["username"] = form.username.data.strip()
    fields["email"] = form.email.data.strip().lower()
    user = service.create_user(fields)
    return jsonify(user.to_dict()), 201


@users_bp.get("/users/<int:user_id>/cats")
def list_user_cats(user_id):
    cats = service.get_cats_by_user(user_id)
    return jsonify([c.to_dict() for c in cats])
