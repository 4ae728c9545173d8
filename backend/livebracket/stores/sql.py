import json
from typing import Any

from databases import Database

from livebracket.stores import Document, split_path


def _decode(value: Any) -> Document:
    # asyncpg hands JSON columns back as text, other drivers decode them already.
    return json.loads(value) if isinstance(value, str) else dict(value)


class SqlDocumentStore:
    def __init__(self, database: Database) -> None:
        self._database = database

    async def get(self, path: str) -> Document | None:
        collection, key = split_path(path)
        query = """
            SELECT value
            FROM documents
            WHERE collection = :collection
            AND key = :key
            """
        row = await self._database.fetch_one(
            query=query, values={"collection": collection, "key": key}
        )
        return _decode(row._mapping["value"]) if row is not None else None

    async def set(self, path: str, value: Document) -> None:
        collection, key = split_path(path)
        query = """
            INSERT INTO documents (collection, key, value)
            VALUES (:collection, :key, CAST(:value AS JSON))
            ON CONFLICT (collection, key) DO UPDATE
            SET value = EXCLUDED.value, updated = now()
            """
        await self._database.execute(
            query=query,
            values={"collection": collection, "key": key, "value": json.dumps(value)},
        )

    async def delete(self, path: str) -> None:
        collection, key = split_path(path)
        query = """
            DELETE FROM documents
            WHERE collection = :collection
            AND key = :key
            """
        await self._database.execute(query=query, values={"collection": collection, "key": key})

    async def get_collection(self, collection: str) -> dict[str, Document]:
        query = """
            SELECT key, value
            FROM documents
            WHERE collection = :collection
            ORDER BY id
            """
        rows = await self._database.fetch_all(
            query=query, values={"collection": collection.strip("/")}
        )
        return {row._mapping["key"]: _decode(row._mapping["value"]) for row in rows}
