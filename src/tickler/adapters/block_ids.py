"""Block id writer - gives notification lines a stable ``^id`` anchor."""

import logging
from collections import defaultdict
from dataclasses import replace
from pathlib import Path

from tickler.core.events import EventRecord
from tickler.core.parser import extract_block_id, generate_block_id

logger = logging.getLogger(__name__)


class BlockIdWriter:
    """Appends block ids to vault lines that have none."""

    def __init__(self, vault_dir: Path | str):
        self.vault_dir = Path(vault_dir).expanduser()

    def assign(self, events: list[EventRecord]) -> list[EventRecord]:
        """
        Add a block id to every record that lacks one.

        Lines that changed since they were parsed are left alone. Returns the
        records with updated block_id/original_text; inputs are not mutated.
        """
        by_file: dict[str, list[EventRecord]] = defaultdict(list)
        for event in events:
            if not event.block_id:
                by_file[event.file_path].append(event)

        updated: dict[tuple[str, int], EventRecord] = {}
        for file_path, pending in by_file.items():
            for event in self._assign_in_file(file_path, pending):
                updated[(event.file_path, event.line_number)] = event

        if updated:
            logger.debug(f"Added block ids to {len(updated)} events")
        return [updated.get((e.file_path, e.line_number), e) for e in events]

    def _assign_in_file(self, file_path: str, events: list[EventRecord]) -> list[EventRecord]:
        path = self.vault_dir / file_path
        if not path.is_file():
            logger.warning(f"File not found: {file_path}")
            return []

        try:
            lines = path.read_text(encoding="utf-8").split("\n")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {file_path}: {e}")
            return []

        taken = {block_id for line in lines if (block_id := extract_block_id(line))}
        changed = []
        for event in events:
            index = event.line_number - 1
            if not 0 <= index < len(lines):
                logger.warning(f"Line {event.line_number} not found in {file_path}")
                continue
            if lines[index] != event.original_text:
                logger.warning(
                    f"Line {event.line_number} in {file_path} has changed, skipping block id"
                )
                continue

            block_id = generate_block_id()
            while block_id in taken:
                block_id = generate_block_id()
            taken.add(block_id)

            lines[index] = f"{lines[index]} ^{block_id}"
            changed.append(replace(event, block_id=block_id, original_text=lines[index]))
            logger.debug(f"Added block id ^{block_id} to {file_path}:{event.line_number}")

        if changed:
            try:
                path.write_text("\n".join(lines), encoding="utf-8")
            except OSError as e:
                logger.error(f"Failed to write block ids to {file_path}: {e}")
                return []
        return changed
