from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
GEOFENCE_ENFORCE = True
RECAP_MAX_WORKERS = 1
