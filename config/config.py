import os
import urllib.parse


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "backoffice_db"),
    }


def database_uri(db_config: dict, database_url: str | None = None) -> str:
    """DATABASE_URL wins; otherwise a mysql-connector URI built from DB_CONFIG."""
    if database_url:
        return database_url
    password = urllib.parse.quote_plus(str(db_config.get("password", "")))
    return (
        f"mysql+mysqlconnector://{db_config['user']}:{password}"
        f"@{db_config['host']}:{db_config.get('port', 3306)}/{db_config['database']}"
    )
