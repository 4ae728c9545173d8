import asyncio
import json
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from livebracket.stores import Document, split_path
from livebracket.utils.logging import logger


class JsonFileDocumentStore:
    """
    Stores every collection in a single JSON file.

    The whole file is rewritten on each mutation through a temporary file and an atomic
    rename, so a crash mid-write never leaves a truncated database behind.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    async def _load(self) -> dict[str, dict[str, Document]]:
        if not await aiofiles.os.path.exists(self._path):
            return {}

        async with aiofiles.open(self._path, encoding="utf-8") as file:
            raw = await file.read()

        if raw.strip() == "":
            return {}
        try:
            content: Any = json.loads(raw)
        except ValueError:
            logger.error(f"Document store file {self._path} is not valid JSON")
            raise
        return content if isinstance(content, dict) else {}

    async def _dump(self, content: dict[str, dict[str, Document]]) -> None:
        tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as file:
            await file.write(json.dumps(content, indent=2))
        await aiofiles.os.replace(tmp_path, self._path)

    async def get(self, path: str) -> Document | None:
        collection, key = split_path(path)
        async with self._lock:
            content = await self._load()
        return content.get(collection, {}).get(key)

    async def set(self, path: str, value: Document) -> None:
        collection, key = split_path(path)
        async with self._lock:
            content = await self._load()
            content.setdefault(collection, {})[key] = json.loads(json.dumps(value))
            await self._dump(content)

    async def delete(self, path: str) -> None:
        collection, key = split_path(path)
        async with self._lock:
            content = await self._load()
            if content.get(collection, {}).pop(key, None) is not None:
                await self._dump(content)

    async def get_collection(self, collection: str) -> dict[str, Document]:
        async with self._lock:
            content = await self._load()
        return content.get(collection.strip("/"), {})
