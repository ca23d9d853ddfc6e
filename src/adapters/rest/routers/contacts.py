"""Contact CRUD endpoints.

Domain errors raised here are turned into the JSON failure envelope by
the exception handler registered in adapters.rest.app.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from application.services.contacts import ContactService
from adapters.rest.dependencies import get_contact_service
from adapters.rest.schemas import ContactCreateBody, ContactUpdateBody

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


@router.get("")
async def list_contacts(
    q: Optional[str] = Query(default=None, description="Filter by name or email substring"),
    service: ContactService = Depends(get_contact_service),
):
    contacts = await service.list_contacts(q)
    return {"success": True, "data": [c.to_dict() for c in contacts]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: ContactCreateBody,
    service: ContactService = Depends(get_contact_service),
):
    contact = await service.create_contact(body.to_patch())
    return {"success": True, "data": contact.to_dict()}


@router.put("/{contact_id}")
async def update_contact(
    contact_id: int,
    body: ContactUpdateBody,
    service: ContactService = Depends(get_contact_service),
):
    contact = await service.update_contact(contact_id, body.to_patch())
    return {"success": True, "data": contact.to_dict()}


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: int,
    service: ContactService = Depends(get_contact_service),
):
    contact = await service.delete_contact(contact_id)
    return {"success": True, "data": contact.to_dict()}
