import os

from .config import db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")

DEBUG = False
TESTING = True

AUTO_INIT_DB = True
AUTO_SEED_DB = False

SUPERADMIN_USERNAME = "superadmin"
SUPERADMIN_PASSWORD = "superadmin-test"
DEFAULT_USER_PASSWORD = "password123"

DB_RETRIES = 0
DB_RETRY_DELAY_SECONDS = 0.0
