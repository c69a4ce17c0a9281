# intervium/routers/professions.py
from fastapi import APIRouter, Depends, Query

from intervium.deps import get_catalog
from intervium.errors import ValidationFailure
from intervium.services.catalog import Catalog

router = APIRouter(prefix="/api/v1/professions", tags=["professions"])

MIN_QUERY_LENGTH = 2


@router.get("/categories")
def get_categories(catalog: Catalog = Depends(get_catalog)):
    categories = [
        {
            "id": cat.id,
            "name": cat.name,
            "icon": cat.icon,
            "order": cat.order,
            "professionsCount": len(cat.professions),
        }
        for cat in catalog.categories
    ]
    return {"success": True, "count": len(categories), "data": categories}


@router.get("/search")
def search_professions(
    q: str | None = Query(None, description="직무명 / 설명 / 키워드 검색어"),
    catalog: Catalog = Depends(get_catalog),
):
    if not q or len(q.strip()) < MIN_QUERY_LENGTH:
        raise ValidationFailure(
            "query_too_short",
            detail=f"Search query must be at least {MIN_QUERY_LENGTH} characters",
        )

    results = [
        {**prof.model_dump(mode="json"), "category": cat.summary()}
        for prof, cat in catalog.search_professions(q)
    ]
    return {"success": True, "count": len(results), "data": results}


@router.get("/category/{category_id}")
def get_professions_by_category(category_id: str, catalog: Catalog = Depends(get_catalog)):
    category = catalog.get_category(category_id)
    return {
        "success": True,
        "data": {
            "category": category.summary(),
            "professions": [p.model_dump(mode="json") for p in category.professions],
        },
    }


@router.get("")
def get_all_professions(catalog: Catalog = Depends(get_catalog)):
    return {
        "success": True,
        "data": {"categories": [cat.model_dump(mode="json") for cat in catalog.categories]},
    }


@router.get("/{profession_id}")
def get_profession(profession_id: str, catalog: Catalog = Depends(get_catalog)):
    profession, category = catalog.find_profession(profession_id)
    return {
        "success": True,
        "data": {
            "profession": profession.model_dump(mode="json"),
            "category": category.summary(),
        },
    }
