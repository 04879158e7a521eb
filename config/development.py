import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "field_checkin_db"),
}

# Check-ins farther than this from the client site carry a warning.
WARNING_THRESHOLD_METERS = float(os.getenv("WARNING_THRESHOLD_METERS", "500"))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "50"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo users/clients on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
