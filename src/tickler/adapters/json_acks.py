"""JSON file acknowledgement store adapter."""

import json
import logging
from datetime import date
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonAcknowledgementStore:
    """
    Acknowledgements kept in a single JSON object: key -> ISO date.

    Implements AcknowledgementStore protocol.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> dict[str, date]:
        """Load acknowledgements. Missing or unreadable file loads as empty."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
            return {key: date.fromisoformat(value) for key, value in data.items()}
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Failed to parse acknowledgements in {self.path}: {e}")
            return {}

    def _save(self, acks: dict[str, date]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({key: value.isoformat() for key, value in sorted(acks.items())}, indent=2)
        )

    def acknowledge(self, key: str, on: date) -> None:
        acks = self.load()
        acks[key] = on
        self._save(acks)

    def unacknowledge(self, key: str) -> bool:
        acks = self.load()
        if key not in acks:
            return False
        del acks[key]
        self._save(acks)
        return True
