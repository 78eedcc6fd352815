from typing import Any, Dict, List, Optional, Sequence, Tuple

# Every helper takes the schema-scoped database handle (see
# supabase_client.get_database) instead of a module-level client, and
# returns (ok, message, data).

OrderBy = Sequence[Tuple[str, bool]]  # (column, descending)


def fetch_rows(
        db,
        table_name: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[OrderBy] = None,
) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Fetch rows matching all equality `filters`, ordered by `order_by`.
    Returns (ok, message, rows)
    """
    try:
        query = db.table(table_name).select(columns)

        for col_name, val in (filters or {}).items():
            query = query.eq(col_name, val)

        for col_name, descending in (order_by or ()):
            query = query.order(col_name, desc=descending)

        resp = query.execute()

        if getattr(resp, "error", None):
            return False, f"Fetch {table_name} failed: {resp.error}", []

        if not resp.data:
            return True, "No rows found", []

        return True, "Fetched", list(resp.data)

    except Exception as e:
        return False, f"Fetch {table_name} failed: {e}", []


def fetch_one(
        db,
        table_name: str,
        col_name: str,
        val: Any,
        columns: str = "*",
) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Returns (ok, message, row_or_none)
    """
    try:
        resp = (
            db.table(table_name)
            .select(columns)
            .eq(col_name, val)
            .limit(1)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch {table_name} failed: {resp.error}", None

        if not resp.data:
            return True, "No rows found", None

        return True, "Fetched", resp.data[0]

    except Exception as e:
        return False, f"Fetch {table_name} failed: {e}", None


def insert_rows(
        db,
        table_name: str,
        rows: List[Dict[str, Any]] | Dict[str, Any],
) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Insert one row (dict) or many (list of dicts) in a single request.
    Returns (ok, message, inserted_rows)
    """
    try:
        resp = db.table(table_name).insert(rows).execute()

        if getattr(resp, "error", None):
            return False, f"Insert {table_name} failed: {resp.error}", []

        return True, "Inserted", list(resp.data or [])

    except Exception as e:
        return False, f"Insert {table_name} failed: {e}", []


def update_rows(
        db,
        table_name: str,
        values: Dict[str, Any],
        col_name: str,
        val: Any,
) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Update every row where `col_name == val`.
    Returns (ok, message, updated_rows)
    """
    try:
        resp = (
            db.table(table_name)
            .update(values)
            .eq(col_name, val)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Update {table_name} failed: {resp.error}", []

        return True, "Updated", list(resp.data or [])

    except Exception as e:
        return False, f"Update {table_name} failed: {e}", []


def delete_rows(
        db,
        table_name: str,
        col_name: str,
        val: Any,
) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Delete every row where `col_name == val`.
    Returns (ok, message, deleted_rows)
    """
    try:
        resp = (
            db.table(table_name)
            .delete()
            .eq(col_name, val)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Delete {table_name} failed: {resp.error}", []

        return True, "Deleted", list(resp.data or [])

    except Exception as e:
        return False, f"Delete {table_name} failed: {e}", []


def upsert_row(
        db,
        table_name: str,
        row: Dict[str, Any],
        conflict_cols: List[str],
) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    try:
        resp = (
            db.table(table_name)
            .upsert(row, on_conflict=",".join(conflict_cols))
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Upsert {table_name} failed: {resp.error}", None

        upserted = resp.data[0] if resp.data else None
        return True, "Upserted", upserted

    except Exception as e:
        return False, f"Upsert {table_name} failed: {e}", None
