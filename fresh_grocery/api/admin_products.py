"""Admin product management endpoints, CSV import included."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, Response, request
from spectree import Response as SpectreeResponse

from fresh_grocery.exceptions import ValidationException
from fresh_grocery.models.profile import AppRole
from fresh_grocery.schemas.product_schema import (
    ImportRowErrorSchema,
    ProductCreateSchema,
    ProductImportResponseSchema,
    ProductListResponseSchema,
    ProductResponseSchema,
    ProductUpdateSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.product_import_service import ProductImportService
from fresh_grocery.services.product_service import ProductService
from fresh_grocery.utils.auth import allow_roles
from fresh_grocery.utils.spectree_config import api

admin_products_bp = Blueprint("admin_products", __name__, url_prefix="/admin/products")


@admin_products_bp.route("", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=ProductListResponseSchema))
@inject
def list_products(
    product_service: ProductService = Provide[ServiceContainer.product_service],
):
    """List every product, inactive ones included."""
    products = product_service.get_all()
    return ProductListResponseSchema(
        items=[ProductResponseSchema.model_validate(product) for product in products],
        total=len(products),
    ).model_dump(mode="json")


@admin_products_bp.route("", methods=["POST"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_201=ProductResponseSchema), json=ProductCreateSchema)
@inject
def create_product(
    product_service: ProductService = Provide[ServiceContainer.product_service],
):
    data = ProductCreateSchema(**request.get_json())
    product = product_service.create(**data.model_dump())
    return ProductResponseSchema.model_validate(product).model_dump(mode="json"), 201


@admin_products_bp.route("/<int:product_id>", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=ProductResponseSchema))
@inject
def get_product(
    product_id: int,
    product_service: ProductService = Provide[ServiceContainer.product_service],
):
    product = product_service.get_by_id(product_id)
    return ProductResponseSchema.model_validate(product).model_dump(mode="json")


@admin_products_bp.route("/<int:product_id>", methods=["PUT"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=ProductResponseSchema), json=ProductUpdateSchema)
@inject
def update_product(
    product_id: int,
    product_service: ProductService = Provide[ServiceContainer.product_service],
):
    data = ProductUpdateSchema(**request.get_json())
    product = product_service.update(product_id, **data.model_dump(exclude_unset=True))
    return ProductResponseSchema.model_validate(product).model_dump(mode="json")


@admin_products_bp.route("/<int:product_id>", methods=["DELETE"])
@allow_roles(AppRole.ADMIN.value)
@inject
def delete_product(
    product_id: int,
    product_service: ProductService = Provide[ServiceContainer.product_service],
):
    """Delete a product. Products still in a subscription basket are refused."""
    product_service.delete(product_id)
    return "", 204


@admin_products_bp.route("/import/template", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@inject
def download_import_template(
    import_service: ProductImportService = Provide[ServiceContainer.product_import_service],
):
    """Download a CSV with the import header and one example row."""
    return Response(
        import_service.template_csv(),
        content_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=product_import_template.csv"},
    )


@admin_products_bp.route("/import", methods=["POST"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=ProductImportResponseSchema))
@inject
def import_products(
    import_service: ProductImportService = Provide[ServiceContainer.product_import_service],
):
    """Import products from CSV.

    Accepts a multipart upload in the ``file`` field or a raw ``text/csv``
    body. ``?dry_run=true`` validates without inserting anything.
    """
    upload = request.files.get("file")
    raw = upload.read() if upload is not None else request.get_data()
    if not raw:
        raise ValidationException("No CSV file provided")

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationException("CSV file must be UTF-8 encoded") from e

    dry_run = request.args.get("dry_run", "").lower() in ("1", "true", "yes")
    result = import_service.import_csv(text, dry_run=dry_run)

    return ProductImportResponseSchema(
        dry_run=dry_run,
        valid_rows=len(result.valid),
        imported=result.imported,
        errors=[ImportRowErrorSchema.model_validate(error) for error in result.errors],
    ).model_dump()
