import os


def get_settings_module() -> str:
    # Read the environment name from APP_ENV, defaulting to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def parse_csv_set(value: str) -> frozenset:
    return frozenset(v.strip() for v in (value or "").split(",") if v.strip())
