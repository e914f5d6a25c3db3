"""
API request and response models for the contact list REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
contacts/models.py, which own the internal domain representation. Route
handlers map between the two.

No request model has an owner or user id field. The caller's identity comes
only from the auth gate; unknown body fields are ignored, so a client cannot
smuggle an owner_id into a create or update.

Separation of concerns: domain dataclasses = storage truth; api/ models = API contract.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from auth.models import User
from contacts.models import Contact
from core.models import Identity

# ---------------------------------------------------------------------------
# Constrained field types
# ---------------------------------------------------------------------------

# Display names: surrounding whitespace stripped, then at least one character.
_Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]

# Passwords are never stripped. 72 is bcrypt's input limit.
_Password = Annotated[str, Field(min_length=6, max_length=72)]

_Phone = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]


# ---------------------------------------------------------------------------
# Users -- request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/users."""

    name: _Name
    email: EmailStr
    password: _Password


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/users/login.

    No length rule on password here: a too-short password is simply wrong,
    and must fail like any other wrong password.
    """

    email: EmailStr
    password: str = Field(min_length=1, max_length=1024)


# ---------------------------------------------------------------------------
# Users -- response models
# ---------------------------------------------------------------------------


class AuthResponse(BaseModel):
    """Response for register and login: the account plus a bearer token."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    token: str

    @classmethod
    def from_user(cls, user: User, token: str) -> "AuthResponse":
        return cls(id=user.id, name=user.name, email=user.email, token=token)


class MeResponse(BaseModel):
    """Response for GET /api/v1/users/me."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str

    @classmethod
    def from_identity(cls, identity: Identity) -> "MeResponse":
        return cls(id=identity.user_id, name=identity.name, email=identity.email)


# ---------------------------------------------------------------------------
# Contacts
# ---------------------------------------------------------------------------


class ContactCreate(BaseModel):
    """Request body for POST /api/v1/contacts.

    phone is optional; an absent or blank phone is stored as "N/A".
    """

    name: _Name
    email: EmailStr
    phone: Optional[_Phone] = None


class ContactUpdate(BaseModel):
    """Request body for PUT /api/v1/contacts/{id}.

    Partial update: only fields present and non-null are changed. Sending
    phone as "" resets it to "N/A".
    """

    name: Optional[_Name] = None
    email: Optional[EmailStr] = None
    phone: Optional[_Phone] = None


class ContactResponse(BaseModel):
    """A single contact as returned to its owner."""

    model_config = ConfigDict(frozen=True)

    id: str
    owner_id: str
    name: str
    email: str
    phone: str
    created_at: str
    updated_at: str

    @classmethod
    def from_contact(cls, contact: Contact) -> "ContactResponse":
        """Build a ContactResponse from a stored Contact dataclass."""
        return cls(
            id=contact.id,
            owner_id=contact.owner_id,
            name=contact.name,
            email=contact.email,
            phone=contact.phone,
            created_at=contact.created_at,
            updated_at=contact.updated_at,
        )


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Shared envelopes
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
