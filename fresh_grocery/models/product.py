"""Product model."""

from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from fresh_grocery.extensions import db
from fresh_grocery.models.base import TimestampMixin


class Product(TimestampMixin, db.Model):  # type: ignore[name-defined]
    """A catalog product. ``price_pkr`` is the daily price of one unit."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    price_pkr: Mapped[Decimal] = mapped_column(sa.Numeric(12, 2), nullable=False)
    category: Mapped[str] = mapped_column(sa.String(100), nullable=False, index=True)
    image_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"
