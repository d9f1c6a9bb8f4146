import os

from config.config import LOG_LEVEL, TIMEZONE, db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB")

LOG_JSON = env_flag("LOG_JSON", "1")
