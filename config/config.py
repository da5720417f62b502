"""Settings shared by every environment, read from environment variables."""

import os

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_db"),
}

DEBUG = bool(int(os.getenv("DEBUG", "0")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Applies database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

# Geofence: office reference coordinate and allowed distance band in meters
OFFICE_LATITUDE = float(os.getenv("OFFICE_LATITUDE", "-8.5207971"))
OFFICE_LONGITUDE = float(os.getenv("OFFICE_LONGITUDE", "115.1378314"))
GEOFENCE_RADIUS_MIN = int(os.getenv("GEOFENCE_RADIUS_MIN", "20"))
GEOFENCE_RADIUS_MAX = int(os.getenv("GEOFENCE_RADIUS_MAX", "50"))
GEOFENCE_ENFORCE = bool(int(os.getenv("GEOFENCE_ENFORCE", "1")))

# Worker threads used when generating recaps for a whole period
RECAP_MAX_WORKERS = int(os.getenv("RECAP_MAX_WORKERS", "1"))
