# hiretrack/services/auth.py
import logging
from datetime import timedelta
from functools import wraps

from flask import current_app, jsonify
from flask_jwt_extended import create_access_token, get_jwt, verify_jwt_in_request

from hiretrack.extensions import bcrypt

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class AuthService:
    @staticmethod
    def init_admin_password(app):
        """Hash ADMIN_PASSWORD once at startup when no ADMIN_PASSWORD_HASH is configured."""
        if not app.config.get("ADMIN_PASSWORD_HASH") and app.config.get("ADMIN_PASSWORD"):
            app.config["ADMIN_PASSWORD_HASH"] = bcrypt.generate_password_hash(
                app.config["ADMIN_PASSWORD"]
            ).decode("utf-8")

    @staticmethod
    def authenticate_admin(email, password):
        """
        Check email & password against the configured admin account.
        Return (token, None) if valid, (None, error message) otherwise.
        """
        logger.info("Auth attempt: %s", email)

        if email != current_app.config["ADMIN_EMAIL"]:
            logger.info("Unknown admin email")
            return None, "Invalid credentials"

        password_hash = current_app.config.get("ADMIN_PASSWORD_HASH")
        if not password_hash or not bcrypt.check_password_hash(password_hash, password):
            logger.info("Invalid password for %s", email)
            return None, "Invalid credentials"

        access_token = create_access_token(
            identity=email,
            additional_claims={
                "role": ADMIN_ROLE,
                "email": email,
            },
            expires_delta=timedelta(hours=current_app.config["JWT_EXPIRES_HOURS"]),
        )
        logger.info("Auth successful for %s", email)
        return access_token, None


def admin_required(fn):
    """Require a valid bearer token carrying the admin role."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if get_jwt().get("role") != ADMIN_ROLE:
            return jsonify({"error": "Admin access required"}), 403
        return fn(*args, **kwargs)
    return wrapper
