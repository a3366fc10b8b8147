import os
from dotenv import load_dotenv

load_dotenv() # load variables from the .env file


def _build_database_uri():
    if os.getenv('DATABASE_URL'):
        return os.getenv('DATABASE_URL')

    db_host = os.getenv('DB_HOST')
    if not db_host:
        return 'sqlite:///hiretrack.db'

    db_user = os.getenv('DB_USER')
    db_password = os.getenv('DB_PASSWORD')
    db_name = os.getenv('DB_NAME')

    # Build MySQL connection string (using PyMySQL driver)
    return (
        f"mysql+pymysql://{db_user}@{db_host}/{db_name}"
        if not db_password else
        f"mysql+pymysql://{db_user}:{db_password}@{db_host}/{db_name}"
    )


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev_secret_change_me')
    DB_HOST = os.getenv('DB_HOST')
    DB_USER = os.getenv('DB_USER')
    DB_PASSWORD = os.getenv('DB_PASSWORD')
    DB_NAME = os.getenv('DB_NAME')

    SQLALCHEMY_DATABASE_URI = _build_database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False  # disables overhead warning

    # signed admin token
    JWT_SECRET_KEY = os.getenv('JWT_SECRET', SECRET_KEY)
    JWT_EXPIRES_HOURS = int(os.getenv('JWT_EXPIRES_HOURS', '2'))

    # single env-based admin account
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', 'admin@example.com')
    ADMIN_PASSWORD_HASH = os.getenv('ADMIN_PASSWORD_HASH', '')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD', 'supersecurepassword')

    # resume storage
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join('uploads', 'resumes'))
    RESUME_BASE_URL = os.getenv('RESUME_BASE_URL', '/uploads/resumes')
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
    RESUME_DOWNLOAD_TIMEOUT = int(os.getenv('RESUME_DOWNLOAD_TIMEOUT', '30'))

    # ATS oracle (any OpenAI-compatible chat completion endpoint, Groq by default)
    ATS_API_KEY = os.getenv('ATS_API_KEY') or os.getenv('GROQ_API_KEY')
    ATS_API_BASE = os.getenv('ATS_API_BASE', 'https://api.groq.com/openai/v1')
    ATS_MODEL = os.getenv('ATS_MODEL', 'llama-3.3-70b-versatile')
    ATS_TIMEOUT = int(os.getenv('ATS_TIMEOUT', '30'))
    ATS_RESUME_CHAR_LIMIT = int(os.getenv('ATS_RESUME_CHAR_LIMIT', '3000'))
    ATS_MIN_RESUME_CHARS = int(os.getenv('ATS_MIN_RESUME_CHARS', '50'))
    ATS_STAGE_THRESHOLDS = os.getenv('ATS_STAGE_THRESHOLDS', 'Screening:60,Interview:75,Offer:90')
    # "sync" scores before responding to the applicant, "background" after
    ATS_SCORING_MODE = os.getenv('ATS_SCORING_MODE', 'sync')

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://localhost:8080').split(',')
        if origin.strip()
    ]

    # Celery: resume storage, deferred scoring and batch re-scoring
    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    CELERY = {
        'broker_url': os.getenv('CELERY_BROKER_URL', REDIS_URL),
        'result_backend': os.getenv('CELERY_RESULT_BACKEND', REDIS_URL),
        'task_serializer': 'json',
        'accept_content': ['json'],
        'result_serializer': 'json',
        'task_ignore_result': True,
        'timezone': 'UTC',
        'enable_utc': True,
        'task_time_limit': int(os.getenv('CELERY_TASK_TIME_LIMIT', '300')),
        'task_acks_late': True,
        'task_reject_on_worker_lost': True,
        'worker_prefetch_multiplier': 1,
    }

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test-secret'
    JWT_SECRET_KEY = 'test-jwt-secret'
    ADMIN_EMAIL = 'admin@example.com'
    ADMIN_PASSWORD_HASH = ''
    ADMIN_PASSWORD = 'supersecurepassword'
    BCRYPT_LOG_ROUNDS = 4
    ATS_API_KEY = 'test-key'
    ATS_SCORING_MODE = 'sync'
    # tasks run inline in the calling process; no broker is contacted
    CELERY = {
        'broker_url': 'memory://',
        'result_backend': 'cache+memory://',
        'task_always_eager': True,
        'task_ignore_result': True,
    }
