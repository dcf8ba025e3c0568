"""
Products API Endpoints
Catalog CRUD plus CSV import/export

Author: Dicompel
Date: 2026-09-10
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from orderdesk.api.deps import get_product_repository, require_manager, to_http_error
from orderdesk.core.errors import DataAccessError
from orderdesk.domain.product import Product, ProductCreate
from orderdesk.domain.user import User
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.services.csv_importer import CsvImporter, export_products_csv
from orderdesk.services.origin_classifier import resolve_origin

router = APIRouter()


@router.get("/")
async def get_products(repo: ProductRepository = Depends(get_product_repository)):
    """
    Get all products

    Served from the local cache snapshot when the remote store is down;
    `origin` tells the caller where each record lives.
    """
    products = await repo.get_all()
    data = []
    for product in products:
        item = product.to_dict()
        item['origin'] = resolve_origin(product).value
        data.append(item)

    return {
        "status": "success",
        "count": len(data),
        "data": data
    }


@router.post("/", status_code=201)
async def create_product(
    product: ProductCreate,
    user: User = Depends(require_manager),
    repo: ProductRepository = Depends(get_product_repository)
):
    try:
        created = await repo.create(product)
    except DataAccessError as e:
        raise to_http_error(e)
    return {"status": "success", "data": created.to_dict()}


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    product: ProductCreate,
    user: User = Depends(require_manager),
    repo: ProductRepository = Depends(get_product_repository)
):
    try:
        await repo.update(Product(id=product_id, **product.model_dump()))
    except DataAccessError as e:
        raise to_http_error(e)
    return {"status": "success"}


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    user: User = Depends(require_manager),
    repo: ProductRepository = Depends(get_product_repository)
):
    try:
        await repo.delete(product_id)
    except DataAccessError as e:
        raise to_http_error(e)
    return {"status": "success"}


@router.post("/import")
async def import_products(
    request: Request,
    user: User = Depends(require_manager),
    repo: ProductRepository = Depends(get_product_repository)
):
    """
    Bulk import products from CSV text (upsert by code)

    Returns the number of products submitted and the skipped line numbers.
    """
    csv_text = (await request.body()).decode("utf-8-sig")
    try:
        result = await CsvImporter().import_into(csv_text, repo)
    except DataAccessError as e:
        raise to_http_error(e)

    return {
        "status": "success",
        "imported": result.count,
        "skipped_lines": result.skipped_lines
    }


@router.get("/export", response_class=PlainTextResponse)
async def export_products(repo: ProductRepository = Depends(get_product_repository)):
    products = await repo.get_all()
    if not products:
        raise HTTPException(status_code=404, detail="No products to export")
    return PlainTextResponse(
        export_products_csv(products),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=produtos.csv"}
    )
