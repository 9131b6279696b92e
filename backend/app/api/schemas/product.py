"""Pydantic models describing Product payloads."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ProductBase(BaseModel):
    name: str = Field(..., max_length=255)
    description: str | None = None
    # Same bounds as the NUMERIC(10, 2) column, so what is accepted is stored unchanged
    price: Decimal = Field(
        ...,
        ge=0,
        max_digits=10,
        decimal_places=2,
        allow_inf_nan=False,
        description="Unit price, at most two decimal places",
    )

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)


class ProductCreate(ProductBase):
    """Schema for new products; the id is always assigned by the database."""

    model_config = ConfigDict(extra="forbid")


class ProductUpdate(ProductBase):
    """Full replacement payload; ``id`` may be echoed back but must match the path."""

    id: int | None = None


class ProductRead(ProductBase):
    id: int

    model_config = ConfigDict(from_attributes=True)
