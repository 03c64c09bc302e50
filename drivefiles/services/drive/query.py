"""Drive search query construction.

Query syntax: https://developers.google.com/drive/api/v3/ref-search-terms
"""


def escape_query(value: str) -> str:
    """Escape a literal for embedding in a single-quoted query value.

    Backslashes are escaped before quotes so inserted backslashes are not
    escaped a second time.
    """
    value = value.replace("\\", "\\\\")
    return value.replace("'", "\\'")


def build_name_query(name: str, parent_id: str = "") -> str:
    """Build a query matching files named exactly ``name``.

    Args:
        name: File name, may contain any characters.
        parent_id: Folder ID to restrict the search to. Empty searches
            every file visible to the user.

    Returns:
        Drive search expression.
    """
    query = f"name = '{escape_query(name)}'"
    if parent_id:
        query += f" and '{parent_id}' in parents"
    return query
