import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module; defaults to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "crewsite.settings.production"

    if env in {"test", "testing"}:
        return "crewsite.settings.testing"

    return "crewsite.settings.development"
