"""Query builders for parameterized SQL fragments.

Column names passed in here come from code, never from request data.
Values always travel as parameters.
"""

from typing import Any


def build_where_clause(
    conditions: dict[str, Any],
    param_map: dict[str, str] | None = None
) -> tuple[str, list[Any]]:
    """Build a WHERE clause from a dict of conditions.

    Args:
        conditions: Mapping of column (or logical filter name) to value.
            None values are skipped.
        param_map: Optional mapping of condition name to a custom SQL
            fragment. A fragment may contain several placeholders; the
            value is bound once per placeholder.

    Returns:
        Tuple of (clause, params). An empty condition set yields "1=1".

    Example:
        >>> build_where_clause({"status": "OPEN", "owner_id": None})
        ('status = ?', ['OPEN'])
    """
    param_map = param_map or {}
    fragments = []
    params: list[Any] = []

    for key, value in conditions.items():
        if value is None:
            continue
        fragment = param_map.get(key, f"{key} = ?")
        fragments.append(fragment)
        params.extend([value] * fragment.count("?"))

    if not fragments:
        return "1=1", []

    return " AND ".join(fragments), params


def build_update_clause(
    data: dict[str, Any],
    exclude: set[str] | None = None
) -> tuple[str, list[Any]]:
    """Build a SET clause for an UPDATE statement.

    Args:
        data: Mapping of column name to new value. None values are skipped.
        exclude: Column names that must never be updated (e.g. {"id"}).

    Returns:
        Tuple of (clause, params). Empty clause when nothing to update.
    """
    exclude = exclude or set()
    fragments = []
    params: list[Any] = []

    for key, value in data.items():
        if key in exclude or value is None:
            continue
        fragments.append(f"{key} = ?")
        params.append(value)

    return ", ".join(fragments), params
