from typing import Any, Protocol

Document = dict[str, Any]


class DocumentStore(Protocol):
    """
    Keyed document store addressed by `<collection>/<key>` paths.

    Reads and writes are atomic per document. Values are plain JSON-compatible dicts and
    callers always receive their own copy.
    """

    async def get(self, path: str) -> Document | None: ...

    async def set(self, path: str, value: Document) -> None: ...

    async def delete(self, path: str) -> None: ...

    async def get_collection(self, collection: str) -> dict[str, Document]: ...


def split_path(path: str) -> tuple[str, str]:
    collection, separator, key = path.strip("/").partition("/")
    if separator == "" or collection == "" or key == "":
        raise ValueError(f"Document path must look like <collection>/<key>, got: {path}")
    return collection, key
