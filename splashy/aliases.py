"""
Collection aliases

Users can save a short name for a collection ('splashy alias set nature 3330445') and use the
name anywhere a collection id is accepted. Aliases are kept in their own store so that clearing
the settings does not wipe them.
"""

from splashy.config import MemorySettingsBackend


class AliasStore:
    """Map alias names to {"id": collection_id} records."""

    def __init__(self, backend=None):
        self.backend = backend if backend is not None else MemorySettingsBackend()

    def has(self, name: str) -> bool:
        return self.backend.has(name)

    def get(self, name: str) -> dict:
        return self.backend.read(name)

    def set(self, name: str, collection_id) -> None:
        self.backend.write(name, {"id": collection_id})

    def remove(self, name: str) -> None:
        self.backend.delete(name)

    def all(self) -> dict:
        return self.backend.dump()


def parse_collection(alias, aliases: AliasStore):
    """
    Resolve an alias to its collection id. Anything that is not a known alias is assumed to
    already be a collection id and is returned unchanged.
    """

    if aliases.has(alias):
        return aliases.get(alias)["id"]

    return alias


def parse_collections(value: str, aliases: AliasStore) -> list:
    """Resolve a comma separated list of aliases and/or ids."""

    return [parse_collection(item.strip(), aliases) for item in value.split(",") if item.strip()]
