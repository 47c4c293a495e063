"""Interaction log: one record per answered question."""

import asyncio
import json
from pathlib import Path
from typing import Protocol

from resume_rag.models.query import InteractionRecord


class InteractionLog(Protocol):
    async def append(self, record: InteractionRecord) -> None:
        ...


class JsonlInteractionLog:
    """Appends records as JSON lines to a local file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    async def append(self, record: InteractionRecord) -> None:
        await asyncio.to_thread(self._write, json.dumps(record.to_dict(), ensure_ascii=False))

    def _write(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")


class NullInteractionLog:
    async def append(self, record: InteractionRecord) -> None:
        return None
