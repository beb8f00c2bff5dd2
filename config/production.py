import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

LOCAL_STORE = os.getenv("LOCAL_STORE", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance"),
}

REMOTE_STORE = os.getenv("REMOTE_STORE", "http")
REMOTE_STORE_URL = os.getenv("REMOTE_STORE_URL", "")
REMOTE_STORE_TOKEN = os.getenv("REMOTE_STORE_TOKEN") or None

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
