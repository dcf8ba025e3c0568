"""
CSV Importer - bulk product import and CSV exports

Import format: the first line is the header (column names, case-insensitive,
whitespace-trimmed), every following non-empty line is a product. Commas
inside a matched pair of double quotes are literal. Each line is tokenized
on its own, so a stray quote cannot swallow the lines after it. The
multi-valued `colors` column uses `|` inside the cell.

The importer never talks to the network: it builds a batch and hands it to
the product repository, which submits a single upsert keyed by code.

Author: Dicompel
Date: 2026-09-05
"""
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from orderdesk.core.errors import ValidationError
from orderdesk.domain.order import CartItem
from orderdesk.domain.product import Product, ProductCreate

logger = logging.getLogger(__name__)

COLOR_SEPARATOR = "|"

DEFAULT_DESCRIPTION = "Sem descrição"
DEFAULT_CATEGORY = "Geral"
PLACEHOLDER_IMAGE_URL = "https://picsum.photos/seed/{seed}/300/300"

# Header aliases -> ProductCreate field
COLUMN_ALIASES: Dict[str, str] = {
    "code": "code",
    "description": "description",
    "reference": "reference",
    "colors": "colors",
    "imageurl": "image_url",
    "image_url": "image_url",
    "category": "category",
    "subcategory": "subcategory",
    "line": "line",
    "amperage": "amperage",
    "details": "details",
}

EXPORT_COLUMNS = [
    "code", "description", "reference", "colors", "image_url",
    "category", "subcategory", "line", "amperage", "details",
]


def placeholder_image_url(code: str) -> str:
    """Deterministic placeholder image, seeded by the product code"""
    return PLACEHOLDER_IMAGE_URL.format(seed=code or "produto")


def split_colors(cell: Optional[str]) -> List[str]:
    if not cell:
        return []
    return [color.strip() for color in cell.split(COLOR_SEPARATOR) if color.strip()]


def join_colors(colors: Iterable[str]) -> str:
    return COLOR_SEPARATOR.join(colors)


@dataclass
class ImportResult:
    """Outcome of parsing one CSV document"""
    products: List[ProductCreate] = field(default_factory=list)
    skipped_lines: List[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.products)


class CsvImporter:
    """
    Parses product CSV text into a batch ready for upsert

    Usage:
        result = CsvImporter().parse(text)
        await product_repository.upsert_many(result.products)
    """

    def parse(self, text: str) -> ImportResult:
        """
        Parse CSV text into ProductCreate records

        Rows without a code are skipped (their line numbers are reported).
        When the same code appears twice, the last row wins, so the batch
        never carries two rows for one conflict key.

        Raises:
            ValidationError: empty document or header without a code column
        """
        rows_with_lines = [
            (line_number, self._tokenize(line))
            for line_number, line in enumerate((text or "").splitlines(), start=1)
            if line.strip()
        ]
        if not rows_with_lines:
            raise ValidationError("CSV vazio: nenhuma linha de cabeçalho encontrada")

        _, header = rows_with_lines[0]
        columns = [COLUMN_ALIASES.get(name.strip().lower()) for name in header]
        if "code" not in columns:
            raise ValidationError("Cabeçalho do CSV sem a coluna 'code'", field="code")

        result = ImportResult()
        by_code: Dict[str, ProductCreate] = {}

        for line_number, row in rows_with_lines[1:]:
            values = self._row_to_values(columns, row)
            code = values.get("code", "")
            if not code:
                logger.warning(f"CSV line {line_number} has no code; skipped")
                result.skipped_lines.append(line_number)
                continue
            # Re-inserting moves a repeated code to its last position
            by_code.pop(code, None)
            by_code[code] = self._build_product(values)

        result.products = list(by_code.values())
        logger.info(
            f"Parsed {result.count} products from CSV "
            f"({len(result.skipped_lines)} lines skipped)"
        )
        return result

    @staticmethod
    def _tokenize(line: str) -> List[str]:
        # One physical line per record: an unmatched quote never spans lines
        return next(csv.reader([line], skipinitialspace=True), [])

    @staticmethod
    def _row_to_values(columns: List[Optional[str]], row: List[str]) -> Dict[str, str]:
        values: Dict[str, str] = {}
        for index, column in enumerate(columns):
            if column is None or index >= len(row):
                continue
            values[column] = row[index].strip()
        return values

    @staticmethod
    def _build_product(values: Dict[str, str]) -> ProductCreate:
        code = values["code"]
        return ProductCreate(
            code=code,
            description=values.get("description") or DEFAULT_DESCRIPTION,
            reference=values.get("reference", ""),
            colors=split_colors(values.get("colors")),
            image_url=values.get("image_url") or placeholder_image_url(code),
            category=values.get("category") or DEFAULT_CATEGORY,
            subcategory=values.get("subcategory", ""),
            line=values.get("line", ""),
            amperage=values.get("amperage") or None,
            details=values.get("details") or None,
        )

    async def import_into(self, text: str, repository) -> ImportResult:
        """Parse `text` and submit the batch as one upsert through `repository`"""
        result = self.parse(text)
        if result.products:
            await repository.upsert_many(result.products)
        return result


def export_products_csv(products: Iterable[Product]) -> str:
    """Serialize products in the import format (re-importable)"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for product in products:
        writer.writerow([
            product.code,
            product.description,
            product.reference,
            join_colors(product.colors),
            product.image_url,
            product.category,
            product.subcategory,
            product.line,
            product.amperage or "",
            product.details or "",
        ])
    return buffer.getvalue()


def export_cart_csv(items: Iterable[CartItem], reseller_name: str = "") -> str:
    """Order download offered from the cart screen"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Código", "Descrição", "Referência", "Quantidade", "Revenda"])
    for item in items:
        writer.writerow([item.code, item.description, item.reference, item.quantity, reseller_name])
    return buffer.getvalue()
