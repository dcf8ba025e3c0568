"""
Unit tests for CsvImporter and the CSV exports

Author: Dicompel
Date: 2026-09-12
"""
import csv
import io

import pytest

from orderdesk.core.errors import ValidationError
from orderdesk.domain.product import Product
from orderdesk.services.csv_importer import (
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    CsvImporter,
    export_cart_csv,
    export_products_csv,
    placeholder_image_url,
)


THREE_PRODUCTS = (
    "code,description,reference,colors,imageUrl,category\n"
    "A,Tomada A,REF-A,Branco|Preto,https://img/a.png,Tomadas\n"
    "B,Tomada B,REF-B,,https://img/b.png,Tomadas\n"
    "C,Interruptor C,REF-C,Cinza,https://img/c.png,Interruptores\n"
)


class TestParse:
    """Test CsvImporter.parse"""

    def test_quoted_comma_stays_in_one_field(self):
        text = 'code,description,category\nX1,"Tomada 10A, Branca","Elétrica, Ltda"\n'

        result = CsvImporter().parse(text)

        product = result.products[0]
        assert product.description == "Tomada 10A, Branca"
        assert product.category == "Elétrica, Ltda"
        assert product.subcategory == ""

    def test_header_is_case_insensitive_and_trimmed(self):
        text = " CODE , Description ,IMAGEURL\nT1,Tomada,https://img/t1.png\n"

        product = CsvImporter().parse(text).products[0]

        assert product.code == "T1"
        assert product.image_url == "https://img/t1.png"

    def test_missing_columns_get_defaults(self):
        product = CsvImporter().parse("code\nZ9\n").products[0]

        assert product.description == DEFAULT_DESCRIPTION
        assert product.category == DEFAULT_CATEGORY
        assert product.image_url == placeholder_image_url("Z9")
        assert product.colors == []
        assert product.amperage is None

    def test_colors_are_pipe_separated(self):
        products = CsvImporter().parse(THREE_PRODUCTS).products

        assert products[0].colors == ["Branco", "Preto"]
        assert products[1].colors == []

    def test_rows_without_code_are_skipped_and_reported(self):
        text = "code,description\nA,Tomada\n,Sem código\n\nB,Interruptor\n"

        result = CsvImporter().parse(text)

        assert [p.code for p in result.products] == ["A", "B"]
        assert result.skipped_lines == [3]

    def test_repeated_code_keeps_last_row(self):
        text = "code,description\nA,Primeira\nB,Outra\nA,Segunda\n"

        result = CsvImporter().parse(text)

        assert [p.code for p in result.products] == ["B", "A"]
        assert result.products[1].description == "Segunda"

    def test_unmatched_quote_does_not_swallow_following_lines(self):
        text = 'code,description\nA,"Tomada aberta\nB,Tomada B\nC,Tomada C\n'

        result = CsvImporter().parse(text)

        assert [p.code for p in result.products] == ["A", "B", "C"]
        assert result.products[0].description == "Tomada aberta"
        assert result.skipped_lines == []

    def test_empty_document_is_rejected(self):
        with pytest.raises(ValidationError):
            CsvImporter().parse("  \n\n")

    def test_header_without_code_column_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CsvImporter().parse("description,category\nTomada,Tomadas\n")

        assert exc_info.value.field == "code"


class TestImportInto:
    """Importing through the product repository"""

    @pytest.mark.asyncio
    async def test_importing_same_file_twice_does_not_duplicate(self, product_repo, remote):
        importer = CsvImporter()

        await importer.import_into(THREE_PRODUCTS, product_repo)
        await importer.import_into(THREE_PRODUCTS, product_repo)

        products = await product_repo.get_all()
        assert sorted(p.code for p in products) == ["A", "B", "C"]
        assert remote.calls.count(("products", "upsert")) == 2

    @pytest.mark.asyncio
    async def test_reimport_updates_existing_product(self, product_repo):
        importer = CsvImporter()
        await importer.import_into(THREE_PRODUCTS, product_repo)

        await importer.import_into("code,description\nB,Tomada B Revisada\n", product_repo)

        product = await product_repo.get_by_code("B")
        assert product.description == "Tomada B Revisada"

    @pytest.mark.asyncio
    async def test_header_only_document_makes_no_call(self, product_repo, remote):
        result = await CsvImporter().import_into("code,description\n", product_repo)

        assert result.count == 0
        assert remote.calls == []


class TestExport:

    def test_product_export_can_be_reimported(self):
        products = [
            Product(id="p1", code="TOM-001", description="Tomada 10A, Branca", colors=["Branco", "Preto"],
                    image_url="https://img/1.png", category="Tomadas", amperage="10A"),
        ]

        reparsed = CsvImporter().parse(export_products_csv(products)).products

        assert reparsed[0].description == "Tomada 10A, Branca"
        assert reparsed[0].colors == ["Branco", "Preto"]
        assert reparsed[0].amperage == "10A"

    def test_cart_export_columns(self, cart_items):
        text = export_cart_csv(cart_items, reseller_name="Casa do Eletricista")

        rows = list(csv.reader(io.StringIO(text)))
        assert rows[0] == ["Código", "Descrição", "Referência", "Quantidade", "Revenda"]
        assert rows[1] == ["TOM-001", "Tomada 10A 2P+T Branca", "REF-1001", "50", "Casa do Eletricista"]
        assert len(rows) == 3
