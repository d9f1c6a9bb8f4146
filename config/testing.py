from config.config import TIMEZONE, db_config_from_env, env_flag

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="12345")

DEBUG = False
TESTING = True

AUTO_INIT_DB = env_flag("AUTO_INIT_DB")

LOG_LEVEL = "WARNING"
LOG_JSON = False
