"""
contacts/models.py -- Domain dataclass for a contact record.

Pure data container with zero logic. The store owns persistence rules
(timestamps, owner scoping); api/routes/v1/contacts.py owns authorization.
"""

from dataclasses import dataclass
from typing import Optional

# Stored when a contact is created or updated without a phone number.
UNKNOWN_PHONE = "N/A"


@dataclass
class Contact:
    """A person in one user's contact list.

    owner_id is the id of the user who created the record. It is written once
    on insert and no store method can change it afterwards.

    id is None before the record is written to the database.
    """

    owner_id: str
    name: str
    email: str
    phone: str = UNKNOWN_PHONE
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, refreshed by store on every update
