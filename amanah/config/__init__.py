from .config import configure_logging, settings

__all__ = ["configure_logging", "settings"]
