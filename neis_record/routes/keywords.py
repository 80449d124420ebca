# neis_record/routes/keywords.py
from fastapi import APIRouter, Depends

from neis_record.services.keyword_catalog import KeywordCatalog, get_keyword_catalog

router = APIRouter(prefix="/api/keywords", tags=["keywords"])


@router.get("")
def list_keywords(catalog: KeywordCatalog = Depends(get_keyword_catalog)):
    """관찰 키워드 카탈로그 전체 (표시 순서대로)"""
    return {
        "categories": [c.model_dump() for c in catalog.all_categories()],
        "combinations": [c.model_dump() for c in catalog.combinations],
        "intensityModifiers": {str(k): v.model_dump() for k, v in catalog.intensity_modifiers.items()},
        "contextConnectors": {k: list(v) for k, v in catalog.context_connectors.items()},
    }


@router.get("/{keyword_id}")
def get_keyword(keyword_id: str, catalog: KeywordCatalog = Depends(get_keyword_catalog)):
    keyword = catalog.get_keyword(keyword_id)
    category = catalog.get_category(keyword.category_id)
    return {
        "keyword": keyword.model_dump(),
        "category": {"id": category.id, "name": category.name} if category else None,
    }
