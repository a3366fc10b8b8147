import logging
from datetime import datetime

from flask import Flask, jsonify
from pymysql import connect

from config import Config
from .extensions import *
from .models import *
from .celery_app import celery_init_app
from .errors import register_error_handlers
from .routes.auth_routes import auth_bp
from .routes.job_routes import jobs_bp
from .routes.apply_routes import apply_bp
from .routes.admin_routes import admin_bp
from .routes.pipeline_routes import pipeline_bp
from .services.auth import AuthService
from hiretrack.database.seed.seed_all import seed_all

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Allow CORS from the React frontends
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    if app.config.get("DB_HOST") and app.config["SQLALCHEMY_DATABASE_URI"].startswith("mysql"):
        create_database_if_not_exists(app.config)

    # extensions initialization
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)
    celery_init_app(app)

    register_jwt_handlers()
    register_error_handlers(app)
    AuthService.init_admin_password(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(jobs_bp)
    app.register_blueprint(apply_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(pipeline_bp)

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "ok",
            "timestamp": datetime.utcnow().isoformat(),
        })

    app.cli.add_command(seed_all)

    # connect once at startup; the session handle is then shared by every request
    with app.app_context():
        db.create_all()

    return app


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))


def register_jwt_handlers():
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"error": "Missing auth token"}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({"error": "Invalid or expired token"}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Invalid or expired token"}), 401


def create_database_if_not_exists(config):
    host_parts = config["DB_HOST"].split(":")
    host = host_parts[0]
    port = int(host_parts[1]) if len(host_parts) > 1 else 3306

    logger.info("Ensuring database '%s' exists on %s:%s as '%s'", config["DB_NAME"], host, port, config["DB_USER"])

    conn = connect(
        host=host,
        port=port,
        user=config["DB_USER"],
        password=config["DB_PASSWORD"] or "",
    )
    try:
        with conn.cursor() as cursor:
            cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{config['DB_NAME']}`")
        conn.commit()
    finally:
        conn.close()
