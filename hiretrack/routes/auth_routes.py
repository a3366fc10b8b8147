from flask import Blueprint, request, jsonify
from flask_jwt_extended import get_jwt

from hiretrack.errors import AuthError, ValidationError
from hiretrack.services.auth import AuthService, admin_required

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    password = data.get("password")

    if not email or not password:
        raise ValidationError("Email & password required")

    token, error = AuthService.authenticate_admin(email, password)
    if not token:
        raise AuthError(error)

    return jsonify({"token": token}), 200


@auth_bp.route("/me", methods=["GET"])
@admin_required
def me():
    claims = get_jwt()
    return jsonify({"email": claims.get("email"), "role": claims.get("role")}), 200
