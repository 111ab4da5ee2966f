"""Public product catalog endpoints."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.schemas.product_schema import (
    CategoryListResponseSchema,
    ProductListResponseSchema,
    ProductResponseSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.product_service import ProductService
from fresh_grocery.utils.auth import public
from fresh_grocery.utils.spectree_config import api

products_bp = Blueprint("products", __name__, url_prefix="/products")


@products_bp.route("", methods=["GET"])
@public
@api.validate(resp=SpectreeResponse(HTTP_200=ProductListResponseSchema))
@inject
def list_products(
    product_service: ProductService = Provide[ServiceContainer.product_service],
):
    """List active products, optionally filtered with ?category=."""
    category = request.args.get("category") or None
    products = product_service.list_active(category)
    return ProductListResponseSchema(
        items=[ProductResponseSchema.model_validate(product) for product in products],
        total=len(products),
    ).model_dump(mode="json")


@products_bp.route("/categories", methods=["GET"])
@public
@api.validate(resp=SpectreeResponse(HTTP_200=CategoryListResponseSchema))
@inject
def list_categories(
    product_service: ProductService = Provide[ServiceContainer.product_service],
):
    """List the categories that have active products."""
    return CategoryListResponseSchema(categories=product_service.list_categories()).model_dump()


@products_bp.route("/<int:product_id>", methods=["GET"])
@public
@api.validate(resp=SpectreeResponse(HTTP_200=ProductResponseSchema))
@inject
def get_product(
    product_id: int,
    product_service: ProductService = Provide[ServiceContainer.product_service],
):
    product = product_service.get_by_id(product_id)
    return ProductResponseSchema.model_validate(product).model_dump(mode="json")
