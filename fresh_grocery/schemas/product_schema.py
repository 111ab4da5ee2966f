"""Product API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ProductCreateSchema(BaseModel):
    """Schema for creating a product."""

    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    description: str | None = Field(None, description="Product description")
    price_pkr: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Daily price of one unit in PKR")
    category: str = Field(..., min_length=1, max_length=100, description="Catalog category")
    image_url: str | None = Field(None, max_length=500, description="Image URL")
    is_active: bool = Field(True, description="Whether the product is shown in the catalog")


class ProductUpdateSchema(BaseModel):
    """Schema for updating a product."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price_pkr: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    category: str | None = Field(None, min_length=1, max_length=100)
    image_url: str | None = Field(None, max_length=500)
    is_active: bool | None = None


class ProductResponseSchema(BaseModel):
    """Schema for product responses."""

    id: int
    name: str
    description: str | None
    price_pkr: float
    category: str
    image_url: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProductListResponseSchema(BaseModel):
    items: list[ProductResponseSchema]
    total: int


class CategoryListResponseSchema(BaseModel):
    categories: list[str]


class ImportRowErrorSchema(BaseModel):
    row: int
    message: str

    model_config = {"from_attributes": True}


class ProductImportResponseSchema(BaseModel):
    """Outcome of a CSV import; ``imported`` is 0 on a dry run."""

    dry_run: bool
    valid_rows: int
    imported: int
    errors: list[ImportRowErrorSchema]
