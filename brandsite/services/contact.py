"""Call-to-action links for services (WhatsApp chat and e-mail)."""

import re
from typing import Optional
from urllib.parse import quote

from brandsite.config import Settings
from brandsite.schemas.service import ServiceContactResponse

WHATSAPP_MESSAGE = "Hola, me interesa el servicio de {title}. Me gustaría obtener más información."
EMAIL_SUBJECT = "Solicitud de cita: {title}"
EMAIL_BODY = "Hola, me interesa agendar una cita para el servicio de {title}."


def whatsapp_url(number: Optional[str], title: str) -> Optional[str]:
    """wa.me deep link with a prefilled message, or None without a number."""
    digits = re.sub(r"\D", "", number or "")
    if not digits:
        return None
    return f"https://wa.me/{digits}?text={quote(WHATSAPP_MESSAGE.format(title=title))}"


def email_url(address: Optional[str], title: str) -> Optional[str]:
    """mailto: link with subject and body, or None without an address."""
    if not address:
        return None
    subject = quote(EMAIL_SUBJECT.format(title=title))
    body = quote(EMAIL_BODY.format(title=title))
    return f"mailto:{address}?subject={subject}&body={body}"


def build_contact_links(settings: Settings, service_id: int, title: str) -> ServiceContactResponse:
    return ServiceContactResponse(
        service_id=service_id,
        whatsapp_url=whatsapp_url(settings.CONTACT_WHATSAPP, title),
        email_url=email_url(settings.CONTACT_EMAIL, title),
    )
