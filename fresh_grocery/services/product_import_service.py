"""Bulk product import from CSV."""

import csv
import io
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from fresh_grocery.consts import PRODUCT_CSV_EXAMPLE_ROW, PRODUCT_CSV_HEADERS
from fresh_grocery.exceptions import ValidationException
from fresh_grocery.models.product import Product

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "price_pkr", "category")

# Matches the Numeric(12, 2) price column
PRICE_MAX_DIGITS = 12


def _parse_price(raw: str) -> Decimal | None:
    """Return the price rounded to cents, or None when it is unusable."""
    try:
        price = Decimal(raw).quantize(Decimal("0.01"))
    except InvalidOperation:
        return None
    if not price.is_finite() or price < 0:
        return None
    if len(price.as_tuple().digits) > PRICE_MAX_DIGITS:
        return None
    return price


@dataclass
class ParsedProduct:
    name: str
    description: str | None
    price_pkr: Decimal
    category: str
    image_url: str | None


@dataclass
class RowError:
    row: int
    message: str


@dataclass
class ImportResult:
    valid: list[ParsedProduct] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    imported: int = 0


class ProductImportService:
    """Parses product CSV files and inserts the valid rows.

    Row numbers in reports are 1-based over non-blank lines, so the header
    is row 1 and the first product is row 2.
    """

    def __init__(self, db: Session):
        self.db = db

    def template_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(PRODUCT_CSV_HEADERS)
        writer.writerow(PRODUCT_CSV_EXAMPLE_ROW)
        return buffer.getvalue()

    def parse(self, text: str) -> ImportResult:
        rows = [row for row in csv.reader(io.StringIO(text.lstrip("\ufeff"))) if any(c.strip() for c in row)]
        if not rows:
            raise ValidationException("CSV file is empty")

        headers = [header.strip().lower() for header in rows[0]]
        missing = [column for column in REQUIRED_COLUMNS if column not in headers]
        if missing:
            return ImportResult(
                errors=[RowError(row=1, message=f"Missing required columns: {', '.join(missing)}")]
            )

        index = {name: headers.index(name) for name in PRODUCT_CSV_HEADERS if name in headers}
        result = ImportResult()

        for row_number, values in enumerate(rows[1:], start=2):

            def cell(column: str) -> str:
                position = index.get(column)
                if position is None or position >= len(values):
                    return ""
                return values[position].strip()

            name = cell("name")
            if not name:
                result.errors.append(RowError(row_number, "Missing product name"))
                continue

            raw_price = cell("price_pkr")
            price = _parse_price(raw_price)
            if price is None:
                result.errors.append(RowError(row_number, f"Invalid price: {raw_price}"))
                continue

            category = cell("category")
            if not category:
                result.errors.append(RowError(row_number, "Missing category"))
                continue

            result.valid.append(
                ParsedProduct(
                    name=name,
                    description=cell("description") or None,
                    price_pkr=price,
                    category=category,
                    image_url=cell("image_url") or None,
                )
            )

        return result

    def import_csv(self, text: str, dry_run: bool = False) -> ImportResult:
        """Parse ``text`` and insert its valid rows as active products."""
        result = self.parse(text)
        if dry_run or not result.valid:
            return result

        for parsed in result.valid:
            self.db.add(
                Product(
                    name=parsed.name,
                    description=parsed.description,
                    price_pkr=parsed.price_pkr,
                    category=parsed.category,
                    image_url=parsed.image_url,
                    is_active=True,
                )
            )
        self.db.flush()
        result.imported = len(result.valid)

        logger.info(
            "Imported %d product(s), skipped %d invalid row(s)", result.imported, len(result.errors)
        )
        return result
