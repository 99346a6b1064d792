"""Settings modules, one per deployment environment.

``APP_ENV`` names the environment; short aliases are accepted.
"""

import os

DEFAULT_ENV = "development"

SETTINGS_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "production": "config.production",
    "prod": "config.production",
}


def get_settings_module(env=None) -> str:
    name = (env or os.getenv("APP_ENV") or DEFAULT_ENV).strip().lower()
    try:
        return SETTINGS_MODULES[name]
    except KeyError:
        allowed = ", ".join(sorted(set(SETTINGS_MODULES)))
        raise ValueError(f"Unknown APP_ENV {name!r}; expected one of: {allowed}") from None
