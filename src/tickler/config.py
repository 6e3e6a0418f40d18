"""Configuration management for Tickler."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

TICKLER_HOME = Path(os.environ.get("TICKLER_HOME", Path.home() / "tickler"))
CONFIG_FILE = TICKLER_HOME / "config" / "tickler.conf"
DATA_DIR = TICKLER_HOME / "data"

DEFAULT_LOOKBACK_DAYS = 3
MAX_LOOKBACK_DAYS = 7

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class Config:
    """Tickler configuration."""

    vault_dir: str = ""
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    use_file_date: bool = True
    debug_logging: bool = False
    excluded_folders: list[str] = field(default_factory=list)
    acknowledgements_file: str = ""
    timezone: str = "America/Toronto"
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)
    telegram_digest_time: str = "07:00"

    @property
    def acknowledgements_path(self) -> Path:
        if self.acknowledgements_file:
            return Path(self.acknowledgements_file).expanduser()
        return DATA_DIR / "acknowledgements.json"


def _strip_value(value: str) -> str:
    """Handle quoted values with inline comments: "value" # comment"""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}, using {default}")
    return default


def parse_lookback_days(value: str) -> int | None:
    """Lookback window in days, accepted only within 0..MAX_LOOKBACK_DAYS."""
    try:
        days = int(value)
    except ValueError:
        return None
    if 0 <= days <= MAX_LOOKBACK_DAYS:
        return days
    return None


def parse_config(text: str) -> Config:
    """Parse tickler.conf content. Unknown keys are ignored."""
    config = Config()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "vault_dir":
                config.vault_dir = value
            case "lookback_days":
                days = parse_lookback_days(value)
                if days is None:
                    logger.warning(
                        f"LOOKBACK_DAYS must be 0-{MAX_LOOKBACK_DAYS}, got {value!r}; "
                        f"using {config.lookback_days}"
                    )
                else:
                    config.lookback_days = days
            case "use_file_date":
                config.use_file_date = _parse_bool(key, value, config.use_file_date)
            case "debug_logging":
                config.debug_logging = _parse_bool(key, value, config.debug_logging)
            case "excluded_folders":
                config.excluded_folders = [f.strip() for f in value.split(",") if f.strip()]
            case "acknowledgements_file":
                config.acknowledgements_file = value
            case "timezone":
                config.timezone = value
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_allowed_users":
                try:
                    config.telegram_allowed_users = [
                        int(u.strip()) for u in value.split(",") if u.strip()
                    ]
                except ValueError:
                    logger.warning(f"Invalid TELEGRAM_ALLOWED_USERS: {value!r}")
            case "telegram_digest_time":
                config.telegram_digest_time = value

    return config


def load_config() -> Config:
    """Load configuration from tickler.conf file."""
    if not CONFIG_FILE.exists():
        return Config()
    return parse_config(CONFIG_FILE.read_text())


def configure_logging(debug: bool = False, default_level: int = logging.WARNING) -> None:
    """Set up root logging for CLI and bot entry points."""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=logging.DEBUG if debug else default_level,
    )
