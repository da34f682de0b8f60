"""Pydantic schemas for Service."""

from typing import List, Optional
from pydantic import BaseModel, Field, computed_field

from brandsite.core.icons import ServiceIcon, resolve_icon


class ServiceBase(BaseModel):
    """Base schema for Service."""
    title: str = Field("", max_length=500, description="Service title")
    description: str = Field("", description="Short description")
    content: Optional[str] = Field(None, description="Long-form content")
    icon: Optional[str] = Field(None, max_length=100, description="Icon name")
    youtube_url: Optional[str] = Field(None, max_length=1000, description="Informative video URL")
    order_index: int = Field(0, description="Position in the services listing")


class ServiceCreate(ServiceBase):
    """Schema for creating a new service."""
    pass


class ServiceUpdate(BaseModel):
    """Schema for updating a service."""
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    content: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=100)
    youtube_url: Optional[str] = Field(None, max_length=1000)
    order_index: Optional[int] = None


class ServiceResponse(ServiceBase):
    """Schema for Service response."""
    id: int

    @computed_field
    @property
    def resolved_icon(self) -> ServiceIcon:
        """Icon to render; unknown names fall back to the default icon."""
        return resolve_icon(self.icon)

    class Config:
        from_attributes = True


class ServiceListResponse(BaseModel):
    """Response for listing services."""
    services: List[ServiceResponse]


class ServiceContactResponse(BaseModel):
    """Call-to-action links for a service."""
    service_id: int
    whatsapp_url: Optional[str] = None
    email_url: Optional[str] = None
