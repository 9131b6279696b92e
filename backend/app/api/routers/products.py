"""CRUD endpoints for the product catalogue."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.dependencies.db import get_session
from app.api.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.db.models.product import Product

logger = logging.getLogger(__name__)

router = APIRouter()


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product name is required",
        )
    return cleaned


def _clean_description(description: str | None) -> str | None:
    if description is None:
        return None
    return description.strip() or None


def _get_or_404(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return product


@router.get(
    "/",
    summary="List all products",
    response_model=list[ProductRead],
)
def list_products(db: Session = Depends(get_session)) -> list[ProductRead]:
    """Return every product, oldest first."""
    try:
        products = db.scalars(select(Product).order_by(Product.id)).all()
        return [ProductRead.model_validate(p) for p in products]
    except SQLAlchemyError as e:
        logger.error(f"Database error listing products: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve products",
        ) from e


@router.get(
    "/{product_id}",
    summary="Get a single product",
    response_model=ProductRead,
    responses={404: {"description": "Product not found"}},
)
def get_product(product_id: int, db: Session = Depends(get_session)) -> ProductRead:
    """Return one product by id."""
    try:
        return ProductRead.model_validate(_get_or_404(db, product_id))
    except SQLAlchemyError as e:
        logger.error(f"Database error reading product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve product",
        ) from e


@router.post(
    "/",
    summary="Create a product",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductRead,
)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_session),
) -> ProductRead:
    """Persist a new product and return it with its assigned id."""
    try:
        product = Product(
            name=_clean_name(payload.name),
            description=_clean_description(payload.description),
            price=payload.price,
        )
        db.add(product)
        db.commit()
        db.refresh(product)

        logger.info(f"Created product {product.id}")
        return ProductRead.model_validate(product)

    except HTTPException:
        raise
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Integrity error creating product: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to create product",
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error creating product: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create product",
        ) from e


@router.put(
    "/{product_id}",
    summary="Replace an existing product",
    response_model=ProductRead,
    responses={404: {"description": "Product not found"}},
)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_session),
) -> ProductRead:
    """Overwrite every field of a product with the payload.

    Fields left out of the payload fall back to their defaults, so an omitted
    description clears the stored one.
    """
    if payload.id is not None and payload.id != product_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product id in body does not match the URL",
        )

    try:
        product = _get_or_404(db, product_id)
        product.name = _clean_name(payload.name)
        product.description = _clean_description(payload.description)
        product.price = payload.price
        db.commit()
        db.refresh(product)

        logger.info(f"Updated product {product_id}")
        return ProductRead.model_validate(product)

    except HTTPException:
        raise
    except IntegrityError as e:
        db.rollback()
        logger.error(
            f"Integrity error updating product {product_id}: {e}", exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to update product",
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Database error updating product {product_id}: {e}", exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update product",
        ) from e


@router.delete(
    "/{product_id}",
    summary="Delete a product",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"description": "Product not found"}},
)
def delete_product(product_id: int, db: Session = Depends(get_session)) -> Response:
    """Remove a product permanently."""
    try:
        product = _get_or_404(db, product_id)
        db.delete(product)
        db.commit()

        logger.info(f"Deleted product {product_id}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Database error deleting product {product_id}: {e}", exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete product",
        ) from e
