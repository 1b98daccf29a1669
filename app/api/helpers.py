"""Small stateless helpers used by the frontend."""

from fastapi import APIRouter, Query
from pydantic import BaseModel

from app.core.exceptions import InvalidInput
from app.services.whatsapp import is_valid_phone, normalize_phone, whatsapp_link

router = APIRouter(prefix="/helpers", tags=["helpers"])


class WhatsAppLinkResponse(BaseModel):
    url: str
    phone: str
    text: str


@router.get("/whatsapp-link", response_model=WhatsAppLinkResponse)
def get_whatsapp_link(
    phone: str | None = Query(None),
    text: str = Query(""),
):
    if not phone:
        raise InvalidInput("Phone number is required")

    formatted = normalize_phone(phone)
    if not is_valid_phone(formatted):
        raise InvalidInput("Invalid phone number format")

    return WhatsAppLinkResponse(url=whatsapp_link(formatted, text), phone=formatted, text=text)
