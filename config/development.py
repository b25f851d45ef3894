import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "crew_attendance"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

# Shared 4-digit code gating check-in time corrections at the kiosk
CORRECTION_PIN = os.getenv("CORRECTION_PIN", "1103")

VENUE_TIMEZONE = os.getenv("VENUE_TIMEZONE", "Asia/Tokyo")

# Listed first on the kiosk roster grid (comma separated)
PRIORITY_MEMBERS = [n.strip() for n in os.getenv("PRIORITY_MEMBERS", "").split(",") if n.strip()]

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
