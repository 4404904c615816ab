# backend/auth.py
import logging

from flask import Blueprint, jsonify, request

from . import tokens, users
from .errors import ValidationError

logger = logging.getLogger("finance-backend")

auth_bp = Blueprint("auth", __name__)


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _session_payload(user):
    return {"token": tokens.issue(user.id), "user": user.public()}


@auth_bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    user = users.register(data.get("username"), data.get("email"), data.get("password"))
    return jsonify(_session_payload(user)), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    user = users.authenticate(data.get("email"), data.get("password"))
    logger.info(f"🔑 User {user.id} logged in")
    return jsonify(_session_payload(user)), 200
