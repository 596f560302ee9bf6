import os

DEFAULT_SETTINGS = "config.development"

_SETTINGS_BY_ENV = {
    "dev": DEFAULT_SETTINGS,
    "development": DEFAULT_SETTINGS,
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    # unknown APP_ENV values fall back to development
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _SETTINGS_BY_ENV.get(env, DEFAULT_SETTINGS)
