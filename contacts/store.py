"""
contacts/store.py -- SQLAlchemy-backed persistence layer for contacts.

Uses SQLAlchemy Core (not ORM) so the dataclass in contacts/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change.

Pattern: Repository + Data Mapper. ContactStore is the repository; _row_to_contact
is the mapper. Route handlers never touch SQL directly.

Owner scoping:
  list_contacts() filters by owner_id in the query itself. Rows belonging to
  other users are never loaded, not even to be discarded.

  update_contact() and delete_contact() match on BOTH id and owner_id in a
  single statement. The route checks ownership first to pick the right error,
  and the WHERE clause guarantees that nothing changes if that check is ever
  bypassed or raced.

  owner_id is not an updatable field.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ContactStore("sqlite:///./contact_list.db")
    contact = store.create_contact(Contact(owner_id=uid, name="Ada", email="ada@example.com"))
    store.list_contacts(uid)
    store.update_contact(contact.id, uid, phone="555-0100")
    store.close()
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, MetaData, String, Table, create_engine, event, text
from sqlalchemy.engine import Engine

from contacts.models import UNKNOWN_PHONE, Contact

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_contacts = Table(
    "contacts",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("owner_id", String(32), nullable=False),
    Column("name", String(255), nullable=False),
    Column("email", String(320), nullable=False),
    Column("phone", String(50), nullable=False, server_default=UNKNOWN_PHONE),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Index("ix_contacts_owner_id", "owner_id"),
)

# Fields a caller may change through update_contact(). Validated before any SQL
# is built so an unexpected key (e.g. owner_id) fails loudly.
_UPDATABLE_FIELDS = frozenset({"name", "email", "phone"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ContactStore:
    """Repository for Contact records."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def create_contact(self, contact: Contact) -> Contact:
        """Insert a new contact and return it with id and timestamps filled in."""
        now = _now_iso()
        record = Contact(
            id=uuid.uuid4().hex,
            owner_id=str(contact.owner_id),
            name=contact.name,
            email=contact.email,
            phone=contact.phone or UNKNOWN_PHONE,
            created_at=now,
            updated_at=now,
        )
        with self.engine.connect() as conn:
            conn.execute(
                _contacts.insert().values(
                    id=record.id,
                    owner_id=record.owner_id,
                    name=record.name,
                    email=record.email,
                    phone=record.phone,
                    created_at=record.created_at,
                    updated_at=record.updated_at,
                )
            )
            conn.commit()
        return record

    def get_contact(self, contact_id: str) -> Optional[Contact]:
        """Fetch a single contact by ID regardless of owner. Returns None if not found.

        Callers must run the ownership check on the result before exposing it.
        """
        with self.engine.connect() as conn:
            row = conn.execute(_contacts.select().where(_contacts.c.id == contact_id)).fetchone()
        return _row_to_contact(row) if row is not None else None

    def list_contacts(self, owner_id: str) -> list[Contact]:
        """Return every contact owned by owner_id, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _contacts.select()
                .where(_contacts.c.owner_id == str(owner_id))
                .order_by(_contacts.c.created_at, _contacts.c.id)
            ).fetchall()
        return [_row_to_contact(r) for r in rows]

    def update_contact(self, contact_id: str, owner_id: str, /, **fields) -> Optional[Contact]:
        """Update name, email and/or phone on a contact owned by owner_id.

        Returns the updated contact, or None if no row matched both id and
        owner. A phone of None or "" resets to UNKNOWN_PHONE.

        contact_id and owner_id are positional-only, so owner_id=... passed as
        a keyword lands in fields and is refused like any other unknown field.

        Raises ValueError for any field outside name/email/phone.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)!r}")
        if "phone" in fields and not fields["phone"]:
            fields["phone"] = UNKNOWN_PHONE
        fields["updated_at"] = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _contacts.update()
                .where((_contacts.c.id == contact_id) & (_contacts.c.owner_id == str(owner_id)))
                .values(**fields)
            )
            conn.commit()
        if result.rowcount == 0:
            return None
        return self.get_contact(contact_id)

    def delete_contact(self, contact_id: str, owner_id: str) -> bool:
        """Delete a contact. owner_id is checked in the same statement.

        Returns True if a contact was deleted, False if not found or wrong owner.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _contacts.delete().where((_contacts.c.id == contact_id) & (_contacts.c.owner_id == str(owner_id)))
            )
            conn.commit()
        return result.rowcount > 0

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_contact(row) -> Contact:
    return Contact(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
