# tasklist/config.py

import os
import argparse
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .persistence import MAX_LOGS

ENV_PREFIX = "TASKLIST"


def _env(name: str, default: str = "") -> str:
    value = os.getenv(f"{ENV_PREFIX}_{name}")
    return default if value is None or not value.strip() else value.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(f"{ENV_PREFIX}_{name}")
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    try:
        value = int(_env(name, str(default)))
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass
class Settings:
    data_file: str = "tasks.json"
    log_file: str = "debug.log"
    release: bool = False
    max_logs: int = MAX_LOGS

    @classmethod
    def from_env(cls, argv: Optional[Sequence[str]] = None) -> "Settings":
        """Build settings from TASKLIST_* environment variables and command-line flags.

        Flags win over the environment.
        """
        parser = argparse.ArgumentParser(prog="tasklist", description="Terminal task list")
        parser.add_argument("--release", action="store_true",
                            help="append to the debug log instead of overwriting it")
        parser.add_argument("--data-file", help="JSON file holding tasks and the activity log")
        args, _unknown = parser.parse_known_args(list(argv) if argv is not None else [])

        return cls(
            data_file=args.data_file or _env("DATA_FILE", cls.data_file),
            log_file=_env("LOG_FILE", cls.log_file),
            release=args.release or _env_bool("RELEASE", False),
            max_logs=_env_int("MAX_LOGS", MAX_LOGS),
        )


def configure_logging(settings: Settings) -> None:
    """Send debug logs to a file; release runs append, dev runs start fresh."""
    logging.basicConfig(
        filename=settings.log_file,
        filemode='a' if settings.release else 'w',
        level=logging.INFO if settings.release else logging.DEBUG,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
