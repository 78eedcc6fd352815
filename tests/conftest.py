import itertools
from types import SimpleNamespace

import pytest

from domain.models import ShirtDesign


class FakeQuery:
    """
    In-memory stand-in for the supabase query builder: chainable
    select/insert/update/delete/upsert, eq filters, order and limit.
    """

    def __init__(self, db, table_name):
        self.db = db
        self.table_name = table_name
        self.op = "select"
        self.payload = None
        self.on_conflict = None
        self.filters = []
        self.orders = []
        self.limit_n = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, rows):
        self.op = "insert"
        self.payload = rows
        return self

    def update(self, values):
        self.op = "update"
        self.payload = values
        return self

    def delete(self):
        self.op = "delete"
        return self

    def upsert(self, row, on_conflict=""):
        self.op = "upsert"
        self.payload = row
        self.on_conflict = on_conflict
        return self

    def eq(self, col, val):
        self.filters.append((col, val))
        return self

    def order(self, col, desc=False):
        self.orders.append((col, desc))
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(row.get(col) == val for col, val in self.filters)

    def execute(self):
        self.db.calls.append((self.op, self.table_name))
        if (self.op, self.table_name) in self.db.fail_on:
            raise RuntimeError(f"{self.op} {self.table_name} unavailable")

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.op == "select":
            data = [dict(r) for r in rows if self._matches(r)]
            for col, desc in reversed(self.orders):
                data.sort(key=lambda r: (r.get(col) is None, r.get(col)), reverse=desc)
            if self.limit_n is not None:
                data = data[: self.limit_n]
            return SimpleNamespace(data=data, error=None)

        if self.op == "insert":
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for row in new_rows:
                row = dict(row)
                row.setdefault("id", next(self.db.ids))
                rows.append(row)
                inserted.append(dict(row))
            return SimpleNamespace(data=inserted, error=None)

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated, error=None)

        if self.op == "delete":
            deleted = [dict(r) for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=deleted, error=None)

        if self.op == "upsert":
            keys = [k for k in self.on_conflict.split(",") if k]
            for row in rows:
                if all(row.get(k) == self.payload.get(k) for k in keys):
                    row.update(self.payload)
                    return SimpleNamespace(data=[dict(row)], error=None)
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[dict(self.payload)], error=None)

        raise ValueError(self.op)


class FakeDatabase:
    def __init__(self, tables=None):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.ids = itertools.count(1)
        self.calls = []
        self.fail_on = set()

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, name):
        return self.tables.get(name, [])


def design_row(design_id, name, price=350, **extra):
    row = {
        "id": design_id,
        "name": name,
        "price": price,
        "description": f"{name} shirt",
        "front_image": None,
        "back_image": None,
        "is_active": True,
        "display_order": int(design_id) if design_id.isdigit() else 0,
        "is_combo": False,
    }
    row.update(extra)
    return row


@pytest.fixture
def design_rows():
    return [
        design_row("1", "Tiger Classic"),
        design_row("2", "Tiger Stripe", price=390),
        design_row("3", "Meeting Combo", price=650),
    ]


@pytest.fixture
def db(design_rows):
    return FakeDatabase({"shirt_designs": design_rows})


@pytest.fixture
def designs(design_rows):
    return [ShirtDesign.from_row(r) for r in design_rows]


class RecordingUploader:
    def __init__(self, fail=False):
        self.fail = fail
        self.uploads = []

    def __call__(self, filename, mimetype, data):
        if self.fail:
            raise RuntimeError("drive is down")
        self.uploads.append((filename, mimetype, data))
        return f"https://files.example/{filename}"


@pytest.fixture
def uploader():
    return RecordingUploader()


@pytest.fixture
def failing_uploader():
    return RecordingUploader(fail=True)
