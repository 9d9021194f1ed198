"""
Change detection: reject submissions that leave a record as it was.

The comparison is literal. Each field's submitted value (trimmed and
sanitised) is compared with its baseline value (trimmed) as strings, so
"01" and "1" are different values. Baselines must therefore be produced in
the same shape the form submits; for dates that shape is the un-padded output
of rules.dates.split_iso_date.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import Cluster


def changed_fields(cluster: "Cluster", fields: Iterable[str] | None = None) -> tuple[str, ...]:
    """Names of compared fields whose submitted value differs from the baseline."""
    names = tuple(fields) if fields is not None else cluster.field_names
    return tuple(name for name in names if cluster.get(name).value != cluster.get(name).baseline)


def is_unchanged(cluster: "Cluster", fields: Iterable[str] | None = None) -> bool:
    return not changed_fields(cluster, fields)
