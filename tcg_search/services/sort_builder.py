from typing import List, Tuple

from ..models.constants import DEFAULT_SORT, SORT_FIELD_ALIASES

SortSpec = List[Tuple[str, int]]


def build_sort(order_by: str) -> SortSpec:
    """Map an orderBy directive ("name", "-hp", ...) to a single sort key

    A leading "-" sorts descending. Without a directive cards are ordered by
    newest set first, then by card number.
    """
    if not order_by:
        return list(DEFAULT_SORT)

    descending = order_by.startswith("-")
    field = order_by[1:] if descending else order_by
    if not field:
        return list(DEFAULT_SORT)
    sort_field = SORT_FIELD_ALIASES.get(field, field)
    return [(sort_field, -1 if descending else 1)]
