"""Product administration routes."""

import re
import unicodedata
from decimal import Decimal
from typing import Any, Literal

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from shop.core.dependencies import get_db, get_product_repository
from shop.repository import ProductDetail, ProductRepository

router = APIRouter(
    prefix="/api/products",
    tags=["products"],
)


class ProductSummaryResponse(BaseModel):
    """Schema for product list items."""

    id: int
    sku: str | None = None
    name: str
    slug: str | None = None
    price: float | None = None
    status: bool

    model_config = {"from_attributes": True}


class ProductImageResponse(BaseModel):
    id: int
    product_id: int
    src: str

    model_config = {"from_attributes": True}


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str

    model_config = {"from_attributes": True}


class DeletedResponse(BaseModel):
    deleted: bool


def slugify(value: str) -> str:
    """ASCII, lowercase, hyphen-separated slug of ``value``."""
    ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode()
    return re.sub(r"[^a-z0-9]+", "-", ascii_value.lower()).strip("-")


def _provided(**fields: Any) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


async def create_form(
    name: str = Form(..., min_length=1, max_length=255),
    price: Decimal = Form(..., ge=0),
    sku: str | None = Form(None, max_length=255),
    slug: str | None = Form(None, max_length=255),
    description: str | None = Form(None),
    quantity: int = Form(0, ge=0),
    sale_price: Decimal | None = Form(None, ge=0),
    status: bool = Form(False),
    weight: Decimal | None = Form(None, ge=0),
    mass_unit: str | None = Form(None, max_length=10),
) -> dict[str, Any]:
    """Fields of a new product, with the slug derived from the name when absent.

    A name with nothing sluggable in it leaves the slug NULL.
    """
    return _provided(
        name=name,
        price=price,
        sku=sku,
        slug=slug or slugify(name) or None,
        description=description,
        quantity=quantity,
        sale_price=sale_price,
        status=status,
        weight=weight,
        mass_unit=mass_unit,
    )


async def update_form(
    name: str | None = Form(None, min_length=1, max_length=255),
    price: Decimal | None = Form(None, ge=0),
    sku: str | None = Form(None, max_length=255),
    slug: str | None = Form(None, max_length=255),
    description: str | None = Form(None),
    quantity: int | None = Form(None, ge=0),
    sale_price: Decimal | None = Form(None, ge=0),
    status: bool | None = Form(None),
    weight: Decimal | None = Form(None, ge=0),
    mass_unit: str | None = Form(None, max_length=10),
) -> dict[str, Any]:
    """Only the fields the client sent."""
    return _provided(
        name=name,
        price=price,
        sku=sku,
        slug=slug,
        description=description,
        quantity=quantity,
        sale_price=sale_price,
        status=status,
        weight=weight,
        mass_unit=mass_unit,
    )


@router.get("", response_model=list[ProductSummaryResponse])
async def list_products(
    order: str = Query("id", description="Column to order by"),
    sort: Literal["asc", "desc"] = Query("desc"),
    repo: ProductRepository = Depends(get_product_repository),
):
    """List all products."""
    products = await repo.list_products(order=order, sort=sort)
    return [product.to_summary_dict() for product in products]


@router.get("/search", response_model=list[ProductSummaryResponse])
async def search_products(
    q: str = Query(..., min_length=1, description="Search text"),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Search products by name and description."""
    products = await repo.search_product(q)
    return [product.to_summary_dict() for product in products]


@router.post("", response_model=ProductDetail, status_code=201)
async def create_product(
    fields: dict[str, Any] = Depends(create_form),
    image: list[UploadFile] | None = File(None),
    categories: list[int] | None = Form(None),
    repo: ProductRepository = Depends(get_product_repository),
    session: AsyncSession = Depends(get_db),
):
    """Create a product with optional gallery images and categories."""
    params = dict(fields)
    if image:
        params["image"] = image

    product = await repo.create_product(params)
    if categories:
        await ProductRepository(session, repo.storage, product=product).sync_categories(categories)

    await session.commit()
    return await repo.find_product_by_id(product.id)


@router.delete("/thumbnails", response_model=DeletedResponse)
async def remove_thumbnail(
    src: str = Query(..., min_length=1, description="Stored path of the image"),
    repo: ProductRepository = Depends(get_product_repository),
    session: AsyncSession = Depends(get_db),
):
    """Remove gallery image rows stored under ``src``."""
    deleted = await repo.delete_thumb(src)
    await session.commit()
    return {"deleted": deleted}


@router.get("/slug/{slug}", response_model=ProductDetail)
async def get_product_by_slug(slug: str, repo: ProductRepository = Depends(get_product_repository)):
    return await repo.find_product_by_slug({"slug": slug})


@router.get("/{product_id}", response_model=ProductDetail)
async def get_product(product_id: int, repo: ProductRepository = Depends(get_product_repository)):
    return await repo.find_product_by_id(product_id)


@router.put("/{product_id}", response_model=ProductDetail)
async def update_product(
    product_id: int,
    fields: dict[str, Any] = Depends(update_form),
    image: list[UploadFile] | None = File(None),
    categories: list[int] | None = Form(None),
    repo: ProductRepository = Depends(get_product_repository),
    session: AsyncSession = Depends(get_db),
):
    """Update a product; new images are added to its gallery."""
    params = dict(fields)
    if image:
        params["image"] = image

    await repo.update_product(params, product_id)
    if categories is not None:
        product = await repo.find_product_by_id(product_id)
        await ProductRepository(session, repo.storage, product=product).sync_categories(categories)

    await session.commit()
    return await repo.find_product_by_id(product_id)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    repo: ProductRepository = Depends(get_product_repository),
    session: AsyncSession = Depends(get_db),
):
    """Delete a product and its category links."""
    product = await repo.find_product_by_id(product_id)
    await repo.detach_categories(product)
    await repo.delete_product(product)
    await session.commit()


@router.get("/{product_id}/categories", response_model=list[CategoryResponse])
async def get_product_categories(
    product_id: int,
    repo: ProductRepository = Depends(get_product_repository),
    session: AsyncSession = Depends(get_db),
):
    product = await repo.find_product_by_id(product_id)
    return await ProductRepository(session, repo.storage, product=product).get_categories()


@router.get("/{product_id}/images", response_model=list[ProductImageResponse])
async def get_product_images(
    product_id: int,
    repo: ProductRepository = Depends(get_product_repository),
    session: AsyncSession = Depends(get_db),
):
    product = await repo.find_product_by_id(product_id)
    return await ProductRepository(session, repo.storage, product=product).find_product_images()


@router.delete("/{product_id}/cover", response_model=DeletedResponse)
async def remove_cover(
    product_id: int,
    repo: ProductRepository = Depends(get_product_repository),
    session: AsyncSession = Depends(get_db),
):
    """Clear the product's cover image."""
    await repo.find_product_by_id(product_id)
    deleted = await repo.delete_file({"product": product_id})
    await session.commit()
    return {"deleted": deleted}
