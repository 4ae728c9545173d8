import copy

from livebracket.stores import Document, split_path


class InMemoryDocumentStore:
    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Document]] = {}

    async def get(self, path: str) -> Document | None:
        collection, key = split_path(path)
        document = self._collections.get(collection, {}).get(key)
        return copy.deepcopy(document) if document is not None else None

    async def set(self, path: str, value: Document) -> None:
        collection, key = split_path(path)
        self._collections.setdefault(collection, {})[key] = copy.deepcopy(value)

    async def delete(self, path: str) -> None:
        collection, key = split_path(path)
        self._collections.get(collection, {}).pop(key, None)

    async def get_collection(self, collection: str) -> dict[str, Document]:
        return copy.deepcopy(self._collections.get(collection.strip("/"), {}))
