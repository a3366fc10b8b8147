"""Celery worker entry point: celery -A worker worker --loglevel=info"""
from hiretrack import create_app

flask_app = create_app()
celery_app = flask_app.extensions["celery"]
