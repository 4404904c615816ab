# backend/records.py
"""
Owner-scoped record store for expenses, incomes and investments.

All three collections share one implementation; a `RecordKind` describes
the table and the type-specific fields. Every query filters on user_id, so
a record owned by someone else behaves exactly like a missing one.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from difflib import get_close_matches
from typing import Dict, List, Optional, Tuple

from . import db
from .errors import NotFound, ValidationError

logger = logging.getLogger("finance-backend")

DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y", "%Y/%m/%d", "%d/%m/%Y"]
EXPENSE_CATEGORIES = ["Food", "Transportation", "Entertainment", "Bills", "Other"]
INVESTMENT_TYPES = ["Stocks", "Bonds", "Real Estate", "Crypto", "Other"]
OWNER_FIELDS = ("user_id", "owner", "owner_id")


@dataclass(frozen=True)
class RecordKind:
    name: str                       # singular, used in messages
    table: str
    label_field: Optional[str]      # required descriptive text
    category_field: str
    categories: Optional[Tuple[str, ...]] = None   # None = free text

    @property
    def columns(self) -> List[str]:
        cols = [self.category_field]
        if self.label_field:
            cols.insert(0, self.label_field)
        return cols


EXPENSE = RecordKind("expense", "expenses", "description", "category", tuple(EXPENSE_CATEGORIES))
INCOME = RecordKind("income", "incomes", None, "source")
INVESTMENT = RecordKind("investment", "investments", "name", "type", tuple(INVESTMENT_TYPES))

KINDS: Dict[str, RecordKind] = {k.table: k for k in (EXPENSE, INCOME, INVESTMENT)}


# ---------------- Helpers ----------------
def normalize_category(value, choices):
    """Map to the canonical list; close typos are accepted, anything else is Other."""
    value = str(value).strip()
    for c in choices:
        if value.lower() == c.lower():
            return c
    match = get_close_matches(value.title(), choices, n=1, cutoff=0.75)
    return match[0] if match else "Other"


def parse_date(s):
    """Try multiple date formats, then ISO 8601 (with time and Z suffix)."""
    if s is None or s == "":
        return None
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    s = str(s).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def parse_amount(value):
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValidationError("Amount is required")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number")
    if not math.isfinite(amount):
        raise ValidationError("Amount must be a number")
    if amount < 0:
        raise ValidationError("Amount cannot be negative")
    return round(amount, 2)


def _required_text(fields, key):
    value = fields.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required")
    return value.strip()[:1000]


def clean_fields(kind: RecordKind, fields) -> dict:
    """Validate a request body into column values. Owner fields are dropped."""
    if not isinstance(fields, dict):
        raise ValidationError("Request body must be a JSON object")
    fields = {k: v for k, v in fields.items() if k not in OWNER_FIELDS}

    values = {}
    if kind.label_field:
        values[kind.label_field] = _required_text(fields, kind.label_field)

    category = _required_text(fields, kind.category_field)
    if kind.categories:
        category = normalize_category(category, kind.categories)
    values[kind.category_field] = category

    values["amount"] = parse_amount(fields.get("amount"))

    raw_date = fields.get("date")
    if raw_date in (None, ""):
        values["date"] = date.today().isoformat()
    else:
        parsed = parse_date(raw_date)
        if parsed is None:
            raise ValidationError("Invalid date")
        values["date"] = parsed.isoformat()
    return values


def serialize(row) -> dict:
    record = db.row_to_dict(row)
    record["amount"] = float(record["amount"])
    return record


# ---------------- Store operations ----------------
def create(kind: RecordKind, owner_id: int, fields) -> dict:
    values = clean_fields(kind, fields)
    columns = ["user_id"] + kind.columns + ["amount", "date"]
    params = [owner_id] + [values[c] for c in columns[1:]]
    placeholders = ",".join("?" for _ in columns)

    record_id, _ = db.execute_db(
        f"INSERT INTO {kind.table} ({', '.join(columns)}) VALUES ({placeholders})",
        tuple(params),
    )
    logger.info(f"✅ Created {kind.name} {record_id} for user {owner_id}")
    row = db.query_db(f"SELECT * FROM {kind.table} WHERE id=? AND user_id=?", (record_id, owner_id), one=True)
    return serialize(row)


def list_by_owner(kind: RecordKind, owner_id: int) -> List[dict]:
    rows = db.query_db(
        f"SELECT * FROM {kind.table} WHERE user_id=? ORDER BY date DESC, id DESC",
        (owner_id,),
    )
    return [serialize(r) for r in rows]


def delete_by_owner_and_id(kind: RecordKind, owner_id: int, record_id: int) -> None:
    deleted = 0
    if db.is_row_id(record_id):
        _, deleted = db.execute_db(
            f"DELETE FROM {kind.table} WHERE id=? AND user_id=?",
            (record_id, owner_id),
        )
    if not deleted:
        logger.warning(f"{kind.name.capitalize()} {record_id} not found for user {owner_id}")
        raise NotFound(f"{kind.name.capitalize()} not found")
    logger.info(f"🗑️ Deleted {kind.name} {record_id} for user {owner_id}")
