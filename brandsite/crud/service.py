"""CRUD operations for Service."""

from typing import Any, Dict

from brandsite.core.exceptions import ValidationError
from brandsite.crud.base import CRUDBase
from brandsite.models.service import Service
from brandsite.schemas.service import ServiceCreate, ServiceUpdate


def validate_service(data: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """Require a title and description; empty optional fields become NULL."""
    for field, message in (
        ("title", "El título es requerido"),
        ("description", "La descripción es requerida"),
    ):
        if (not partial or field in data) and not (data.get(field) or "").strip():
            raise ValidationError(message)
    if "order_index" in data and data["order_index"] is None:
        raise ValidationError("El orden es requerido")

    cleaned = dict(data)
    if "title" in cleaned:
        cleaned["title"] = cleaned["title"].strip()
    for field in ("icon", "youtube_url", "content"):
        if field in cleaned and not (cleaned[field] or "").strip():
            cleaned[field] = None
    return cleaned


class CRUDService(CRUDBase[Service, ServiceCreate, ServiceUpdate]):
    """CRUD operations for Service."""

    order_by = (Service.order_index.asc(), Service.id.asc())
    not_found_detail = "Servicio no encontrado"


# Singleton instance
crud_service = CRUDService(Service)
