"""Public product endpoints."""

from fastapi import APIRouter, Depends, status

from brandsite.api.deps import get_content
from brandsite.schemas.product import ProductListResponse, ProductResponse
from brandsite.services.content import ContentService

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


@router.get(
    "",
    response_model=ProductListResponse,
    status_code=status.HTTP_200_OK,
    summary="List published products",
)
async def list_products(
    content: ContentService = Depends(get_content),
) -> ProductListResponse:
    products = await content.list_products()
    return ProductListResponse(
        products=[ProductResponse.model_validate(product) for product in products],
        total=len(products),
    )
