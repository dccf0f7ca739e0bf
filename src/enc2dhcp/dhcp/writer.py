"""Apply a diff to a DHCP hosts file.

Text the diff does not touch (comments, includes, hand-written blocks)
is kept verbatim. Modified blocks are replaced in place, deleted blocks
are dropped and new blocks are appended at the end of the file.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from ..utils.logging_config import timed_section_sync
from .parser import HOST_START, BLOCK_END, HostsFileCache, parse_lines
from .renderer import render_host
from .schema import ChangeType, DiffResult, HostRecord

logger = logging.getLogger(__name__)


class WriteError(Exception):
    """Error writing the hosts file."""
    pass


class HostsFileWriter:
    """Rewrite hosts files according to a DiffResult."""

    def __init__(self, cache: Optional[HostsFileCache] = None):
        """
        Initialize writer.

        Args:
            cache: Parser cache to invalidate after a file is written
        """
        self.cache = cache

    def apply(
        self,
        path: Union[str, Path],
        diff: DiffResult,
        dry_run: bool = False,
    ) -> str:
        """
        Apply changes to the hosts file.

        Args:
            path: Hosts file to update (created if missing)
            diff: Changes to apply
            dry_run: Return the new text without writing it

        Returns:
            The resulting file text

        Raises:
            WriteError: If the file cannot be written
        """
        file_path = Path(path)
        original = self._read(file_path)

        if diff.no_change:
            logger.debug(f"{file_path} already in sync")
            return original

        replacements: dict[str, str] = {}
        deletes: set[str] = set()
        creates: list[str] = []

        for change in diff.changes:
            if change.change_type == ChangeType.MODIFY:
                replacements[change.key] = self._content(change.desired)
            elif change.change_type == ChangeType.DELETE:
                deletes.add(change.key)
            elif change.change_type == ChangeType.CREATE:
                creates.append(self._content(change.desired))

        replaced: set[str] = set()
        text = self._rewrite(original, replacements, deletes, replaced)

        # Modified entries whose block could not be located are appended
        creates.extend(content for key, content in replacements.items() if key not in replaced)
        if creates:
            if text and not text.endswith("\n"):
                text += "\n"
            text += "".join(f"{content}\n" for content in creates)

        if dry_run:
            return text

        with timed_section_sync("hosts_write", target=str(file_path), changes=diff.total_changes):
            try:
                file_path.parent.mkdir(parents=True, exist_ok=True)
                file_path.write_text(text, encoding="utf-8")
            except OSError as e:
                raise WriteError(f"Cannot write {file_path}: {e}") from e

        if self.cache is not None:
            self.cache.invalidate(file_path)

        logger.info(f"Applied {diff.total_changes} change(s) to {file_path}")
        return text

    def _read(self, file_path: Path) -> str:
        if not file_path.is_file():
            return ""
        try:
            return file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise WriteError(f"Cannot read {file_path}: {e}") from e

    def _content(self, record: HostRecord) -> str:
        content = record.content or render_host(record)
        if content is None:
            raise WriteError(f"Host {record.key} is missing name, mac or ip")
        return content

    def _rewrite(
        self,
        text: str,
        replacements: dict[str, str],
        deletes: set[str],
        replaced: set[str],
    ) -> str:
        """
        Walk the file block by block, substituting managed blocks.

        Every block with a deleted key is dropped. The first block with a
        modified key is replaced and later blocks with that key are dropped,
        so duplicate declarations collapse into one. Keys written are added
        to `replaced`.
        """
        out: list[str] = []
        block: list[str] = []

        for raw in text.splitlines(keepends=True):
            line = raw.strip()

            if HOST_START.match(line):
                # An unterminated block is left as it was
                out.extend(block)
                block = [raw]
                continue

            if not block:
                out.append(raw)
                continue

            block.append(raw)
            if BLOCK_END.match(line):
                out.extend(self._resolve_block(block, replacements, deletes, replaced))
                block = []

        out.extend(block)
        return "".join(out)

    def _resolve_block(
        self,
        block: list[str],
        replacements: dict[str, str],
        deletes: set[str],
        replaced: set[str],
    ) -> list[str]:
        parsed = parse_lines(block)
        if not parsed:
            return block

        key = next(iter(parsed))
        if key in deletes:
            logger.debug(f"Removing host block {key}")
            return []
        if key in replacements:
            if key in replaced:
                logger.debug(f"Removing duplicate host block {key}")
                return []
            logger.debug(f"Replacing host block {key}")
            replaced.add(key)
            return [replacements[key] + "\n"]
        return block
