import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Local store: "memory" (lost on restart) or "mysql" (kv_store table)
LOCAL_STORE = os.getenv("LOCAL_STORE", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance"),
}

# Remote store: "memory" or "http" (document API at REMOTE_STORE_URL)
REMOTE_STORE = os.getenv("REMOTE_STORE", "memory")
REMOTE_STORE_URL = os.getenv("REMOTE_STORE_URL", "http://localhost:8080")
REMOTE_STORE_TOKEN = os.getenv("REMOTE_STORE_TOKEN") or None

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
