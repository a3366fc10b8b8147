"""Celery application bound to the Flask app."""
import logging

from celery import Celery, Task

logger = logging.getLogger(__name__)


def celery_init_app(app) -> Celery:
    """
    Build the Celery app from app.config["CELERY"].

    Every task runs inside an application context of the Flask app, so it
    gets its own database session. The instance is stored in
    app.extensions["celery"] and made the current and default Celery app,
    which is what the shared task proxies resolve to.
    """

    class FlaskTask(Task):
        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

        def on_success(self, retval, task_id, args, kwargs):
            logger.info("Task %s (%s) succeeded", self.name, task_id)

        def on_failure(self, exc, task_id, args, kwargs, einfo):
            logger.error("Task %s (%s) failed: %s", self.name, task_id, exc)

    celery_app = Celery(app.name, task_cls=FlaskTask, include=["hiretrack.tasks"])
    celery_app.config_from_object(app.config["CELERY"])
    celery_app.set_default()
    celery_app.set_current()
    app.extensions["celery"] = celery_app

    broker = app.config["CELERY"].get("broker_url")
    logger.info("Celery configured with broker: %s", broker)
    return celery_app
