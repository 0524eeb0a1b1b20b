import logging
from pathlib import Path

from dynaconf import Dynaconf

CONFIG_DIR = Path(__file__).resolve().parent

settings = Dynaconf(
    envvar_prefix="AMANAH",
    environments=True,
    env_switcher="ENV_FOR_DYNACONF",
    settings_files=[
        str(CONFIG_DIR / "settings.toml"),
        str(CONFIG_DIR / ".secrets.toml"),
    ],
    load_dotenv=True,
)


def configure_logging() -> None:
    """Configure root logging from the ``logs`` settings section."""
    logging.basicConfig(level=settings.logs.level_name, format=settings.logs.format)
