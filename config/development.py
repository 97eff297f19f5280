import os

from .config import db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env(default_password="root")
DATABASE_URL = os.getenv("DATABASE_URL")

DEBUG = True

# Create missing tables on startup (db.create_all is idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo products and users
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SUPERADMIN_USERNAME = os.getenv("SUPERADMIN_USERNAME", "superadmin")
SUPERADMIN_PASSWORD = os.getenv("SUPERADMIN_PASSWORD", "superadmin")
DEFAULT_USER_PASSWORD = os.getenv("DEFAULT_USER_PASSWORD", "password123")

DB_RETRIES = int(os.getenv("DB_RETRIES", "2"))
DB_RETRY_DELAY_SECONDS = float(os.getenv("DB_RETRY_DELAY_SECONDS", "1"))
