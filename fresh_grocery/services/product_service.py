"""Product catalog service."""

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fresh_grocery.exceptions import DependencyException, RecordNotFoundException
from fresh_grocery.models.product import Product
from fresh_grocery.models.subscription import SubscriptionItem

logger = logging.getLogger(__name__)


class ProductService:
    """Service for managing catalog products."""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self, category: str | None = None) -> list[Product]:
        """Active products, optionally in one category, sorted by category then name."""
        stmt = select(Product).where(Product.is_active.is_(True))
        if category:
            stmt = stmt.where(Product.category == category)
        stmt = stmt.order_by(Product.category, Product.name, Product.id)
        return list(self.db.scalars(stmt))

    def list_categories(self) -> list[str]:
        stmt = (
            select(Product.category)
            .where(Product.is_active.is_(True))
            .distinct()
            .order_by(Product.category)
        )
        return list(self.db.scalars(stmt))

    def get_all(self) -> list[Product]:
        """All products including inactive ones, newest first."""
        stmt = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
        return list(self.db.scalars(stmt))

    def get_by_id(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if product is None:
            raise RecordNotFoundException("Product", product_id)
        return product

    def count(self) -> int:
        return self.db.scalar(select(func.count(Product.id))) or 0

    def create(
        self,
        name: str,
        price_pkr: Decimal,
        category: str,
        description: str | None = None,
        image_url: str | None = None,
        is_active: bool = True,
    ) -> Product:
        product = Product(
            name=name.strip(),
            description=description,
            price_pkr=price_pkr,
            category=category.strip(),
            image_url=image_url,
            is_active=is_active,
        )
        self.db.add(product)
        self.db.flush()
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    def update(self, product_id: int, **kwargs) -> Product:
        """Update a product. Keys with a None value are left unchanged."""
        product = self.get_by_id(product_id)
        for key, value in kwargs.items():
            if value is not None:
                setattr(product, key, value)
        self.db.flush()
        return product

    def delete(self, product_id: int) -> None:
        product = self.get_by_id(product_id)

        in_use = self.db.scalar(
            select(func.count(SubscriptionItem.id)).where(SubscriptionItem.product_id == product_id)
        )
        if in_use:
            raise DependencyException(
                "product", product_id, f"it is in {in_use} subscription basket(s); deactivate it instead"
            )

        self.db.delete(product)
        self.db.flush()
        logger.info("Deleted product %s", product_id)
