from flask import Blueprint, current_app, jsonify

from ..security import get_tokens
from ..services import accounts
from ..utils import json_body

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/api/register")
def register():
    data = json_body()
    role = accounts.register(
        data.get("username"),
        data.get("password"),
        data.get("secret_code"),
        current_app.config["ADMIN_SECRET"],
    )
    return jsonify({"message": "User created", "role": role}), 201


@auth_bp.post("/api/login")
def login():
    data = json_body()
    return jsonify(accounts.login(data.get("username"), data.get("password"), get_tokens()))
