"""
api/routes/v1/contacts.py -- Contact CRUD routes. Every route requires auth.

Routes:
  GET    /contacts        -- the caller's contacts
  POST   /contacts        -- create a contact owned by the caller (201)
  GET    /contacts/{id}   -- one contact
  PUT    /contacts/{id}   -- partial update
  DELETE /contacts/{id}   -- delete

Authorization order for /contacts/{id}:
  1. resolve the record            -> 404 not_found if missing
  2. auth.ownership.authorize_owner -> 403 forbidden if someone else's
  3. read or mutate

The mutation itself is scoped by (id, owner_id) in the store. If the record
disappears between steps 1 and 3 the route answers 404.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from api.models import ContactCreate, ContactResponse, ContactUpdate, MessageResponse
from auth.dependencies import get_current_identity
from auth.ownership import authorize_owner
from contacts.models import UNKNOWN_PHONE, Contact
from contacts.store import ContactStore
from core.errors import NotFoundError, ValidationError
from core.models import Identity

# Router-level dependency: the auth gate runs for every route on this router,
# before the handler and before any handler-level dependency.
router = APIRouter(dependencies=[Depends(get_current_identity)])


def _owned_contact(store: ContactStore, contact_id: str, identity: Identity) -> Contact:
    """Resolve contact_id and check the caller owns it. 404 first, then 403."""
    contact = store.get_contact(contact_id)
    if contact is None:
        raise NotFoundError("Contact not found.")
    authorize_owner(contact.owner_id, identity, resource=f"contact {contact_id}")
    return contact


@router.get("/contacts", response_model=list[ContactResponse])
def list_contacts(request: Request, identity: Identity = Depends(get_current_identity)) -> list[ContactResponse]:
    store: ContactStore = request.app.state.contact_store
    return [ContactResponse.from_contact(c) for c in store.list_contacts(identity.user_id)]


@router.post("/contacts", response_model=ContactResponse, status_code=201)
def create_contact(
    request: Request,
    body: ContactCreate,
    identity: Identity = Depends(get_current_identity),
) -> ContactResponse:
    """Create a contact. The owner is always the authenticated caller."""
    store: ContactStore = request.app.state.contact_store
    contact = store.create_contact(
        Contact(
            owner_id=identity.user_id,
            name=body.name,
            email=body.email,
            phone=body.phone or UNKNOWN_PHONE,
        )
    )
    return ContactResponse.from_contact(contact)


@router.get("/contacts/{contact_id}", response_model=ContactResponse)
def get_contact(
    request: Request,
    contact_id: str,
    identity: Identity = Depends(get_current_identity),
) -> ContactResponse:
    store: ContactStore = request.app.state.contact_store
    return ContactResponse.from_contact(_owned_contact(store, contact_id, identity))


@router.put("/contacts/{contact_id}", response_model=ContactResponse)
def update_contact(
    request: Request,
    contact_id: str,
    body: ContactUpdate,
    identity: Identity = Depends(get_current_identity),
) -> ContactResponse:
    """Update name, email and/or phone. Fields left out are unchanged."""
    store: ContactStore = request.app.state.contact_store
    _owned_contact(store, contact_id, identity)
    fields = body.model_dump(exclude_none=True)
    if not fields:
        raise ValidationError(detail="Provide at least one of: name, email, phone.")
    updated = store.update_contact(contact_id, identity.user_id, **fields)
    if updated is None:
        raise NotFoundError("Contact not found.")
    return ContactResponse.from_contact(updated)


@router.delete("/contacts/{contact_id}", response_model=MessageResponse)
def delete_contact(
    request: Request,
    contact_id: str,
    identity: Identity = Depends(get_current_identity),
) -> MessageResponse:
    store: ContactStore = request.app.state.contact_store
    _owned_contact(store, contact_id, identity)
    if not store.delete_contact(contact_id, identity.user_id):
        raise NotFoundError("Contact not found.")
    return MessageResponse(message="Contact removed")
