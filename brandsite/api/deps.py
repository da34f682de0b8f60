"""FastAPI dependency injection functions for the data gateway and content contract."""

from fastapi import Depends
from starlette.requests import HTTPConnection

from brandsite.config import Settings
from brandsite.services.content import ContentService
from brandsite.services.gateway import DataGateway


def get_settings(connection: HTTPConnection) -> Settings:
    """Settings the running app was created with."""
    return connection.app.state.settings


def get_gateway(connection: HTTPConnection) -> DataGateway:
    """
    Dependency to get the process-wide data gateway.

    The gateway is built once in the app lifespan and stored on ``app.state``;
    works for both HTTP requests and websockets.
    """
    return connection.app.state.gateway


def get_content(gateway: DataGateway = Depends(get_gateway)) -> ContentService:
    """Dependency to get the content query/mutation contract."""
    return ContentService(gateway)
