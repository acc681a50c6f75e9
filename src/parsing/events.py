"""Incremental decoder for the chat backend's ``data:`` event stream.

Network chunks do not line up with records: a chunk can end in the middle of
a line or even in the middle of a multi-byte UTF-8 character. The decoder
keeps both pieces until the next chunk arrives.
"""

import codecs
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

EVENT_PREFIX = "data: "


class EventStreamDecoder:
    """Turns raw byte chunks into parsed ``data:`` JSON records.

    Lines without the ``data: `` prefix are ignored. Records that fail to
    parse are logged and skipped so later records still get through.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""
        self.skipped = 0

    def feed(self, chunk: bytes) -> list[dict[str, Any]]:
        """Decode a chunk and return the complete records it finished."""
        self._pending += self._decoder.decode(chunk)
        *lines, self._pending = self._pending.split("\n")
        return self._parse_lines(lines)

    def flush(self) -> list[dict[str, Any]]:
        """Parse whatever is left once the stream has ended."""
        self._pending += self._decoder.decode(b"", final=True)
        lines, self._pending = self._pending.split("\n"), ""
        return self._parse_lines(lines)

    def _parse_lines(self, lines: list[str]) -> list[dict[str, Any]]:
        records: list[dict[str, Any]] = []
        for line in lines:
            line = line.rstrip("\r")
            if not line.startswith(EVENT_PREFIX):
                continue
            raw = line[len(EVENT_PREFIX):]
            try:
                record = json.loads(raw)
            except json.JSONDecodeError as e:
                self._skip(raw, f"invalid JSON: {e}")
                continue
            if not isinstance(record, dict):
                self._skip(raw, "record is not an object")
                continue
            records.append(record)
        return records

    def _skip(self, raw: str, reason: str) -> None:
        self.skipped += 1
        logger.warning(
            f"Skipping malformed stream record ({reason}): {raw[:80]!r}",
            extra={"event": "stream.record_skipped"},
        )
