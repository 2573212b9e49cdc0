"""Domain models for environment resolution."""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List


@dataclass(frozen=True)
class PlainEnvEntry:
    """A declared, non-secret environment entry."""
    name: str
    value: str


@dataclass(frozen=True)
class SecretRef:
    """Binds environment variable `name` to a parameter store locator."""
    name: str
    source_locator: str  # SSM parameter name or ARN ("valueFrom")


@dataclass(frozen=True)
class ResolvedSecret:
    """The parameter store's answer for one locator."""
    source_locator: str
    value: str


@dataclass(frozen=True)
class EnvironmentEntry:
    """One entry of the merged environment."""
    name: str
    value: str
    is_secret: bool


class EnvironmentTable(Mapping):
    """
    Immutable ordered mapping of variable name -> EnvironmentEntry.

    Names are unique. Iteration follows insertion order of the entries
    passed to the constructor; a repeated name replaces the earlier entry
    in place.
    """

    def __init__(self, entries: Iterable[EnvironmentEntry] = ()):
        self._entries: Dict[str, EnvironmentEntry] = {}
        for entry in entries:
            self._entries[entry.name] = entry

    def __getitem__(self, name: str) -> EnvironmentEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, EnvironmentTable):
            return NotImplemented
        return list(self._entries.values()) == list(other._entries.values())

    def __hash__(self):
        return hash(tuple(self._entries.values()))

    def __repr__(self) -> str:
        # Values stay out of repr so tables can be logged safely
        names = ", ".join(
            f"{e.name}{'*' if e.is_secret else ''}" for e in self._entries.values()
        )
        return f"EnvironmentTable({names})"

    def entries(self) -> List[EnvironmentEntry]:
        return list(self._entries.values())

    def secret_names(self) -> List[str]:
        return [e.name for e in self._entries.values() if e.is_secret]

    def as_environ(self) -> Dict[str, str]:
        """Flat name -> unmasked value projection, for the child process only."""
        return {e.name: e.value for e in self._entries.values()}
