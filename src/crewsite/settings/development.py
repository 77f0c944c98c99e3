import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "crewsite"),
}

# "memory" keeps everything in-process; "mysql" uses DB_CONFIG.
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEFAULT_RADIUS_METERS = float(os.getenv("DEFAULT_RADIUS_METERS", "200"))

# If enabled, app creates the documents table on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
