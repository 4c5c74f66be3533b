import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the package directory or the backend directory
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


def _origins(raw):
    return [o.strip() for o in raw.split(",") if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/tripsplit')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'tripsplit')
    WTF_CSRF_ENABLED = False

    # JWT session settings
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 60)))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.getenv('JWT_REFRESH_TOKEN_EXPIRES', 10)))

    CORS_ORIGINS = _origins(os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://localhost:8080'))

    # Reporting
    REPORT_UTC_OFFSET = os.getenv('REPORT_UTC_OFFSET', '+05:30')
    RECENT_EXPENSES_LIMIT = int(os.getenv('RECENT_EXPENSES_LIMIT', 5))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'
    LOG_LEVEL = 'DEBUG'
    BCRYPT_LOG_ROUNDS = 4
