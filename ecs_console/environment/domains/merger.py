"""Merge plain entries and resolved secrets into one environment table."""
from typing import Dict, Iterable, List

from .models import EnvironmentEntry, EnvironmentTable, PlainEnvEntry, ResolvedSecret, SecretRef


def merge(
    plain: Iterable[PlainEnvEntry],
    refs: Iterable[SecretRef],
    resolved: Iterable[ResolvedSecret],
) -> EnvironmentTable:
    """
    Build the environment table.

    Plain entries come first, in declaration order. Each secret reference
    whose locator was resolved is then upserted in declaration order,
    replacing a plain entry of the same name. References whose locator is
    not in `resolved` contribute nothing.
    """
    values: Dict[str, str] = {r.source_locator: r.value for r in resolved}

    entries: List[EnvironmentEntry] = [
        EnvironmentEntry(name=p.name, value=p.value, is_secret=False) for p in plain
    ]
    for ref in refs:
        if ref.source_locator in values:
            entries.append(
                EnvironmentEntry(name=ref.name, value=values[ref.source_locator], is_secret=True)
            )

    return EnvironmentTable(entries)
