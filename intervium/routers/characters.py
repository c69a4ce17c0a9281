# intervium/routers/characters.py
from fastapi import APIRouter, Depends

from intervium.deps import get_catalog, get_current_user, get_store
from intervium.services.attempt_store import AttemptStore
from intervium.services.catalog import Catalog
from intervium.services.recommendation import recommend

router = APIRouter(prefix="/api/v1/characters", tags=["characters"])


def _dump(characters) -> list:
    return [c.model_dump(mode="json") for c in characters]


# 구체적인 경로를 먼저 등록 (":character_id" 는 마지막)
@router.get("/difficulty/{level}")
def get_characters_by_difficulty(level: str, catalog: Catalog = Depends(get_catalog)):
    characters = catalog.by_difficulty(level.lower())
    return {"success": True, "count": len(characters), "data": _dump(characters)}


@router.get("/recommend")
def get_recommended_character(
    current=Depends(get_current_user),
    store: AttemptStore = Depends(get_store),
    catalog: Catalog = Depends(get_catalog),
):
    """
    최근 면접 이력으로 다음 면접관 추천.
    - 이력 없음: easy 캐릭터 (첫 면접 안내 메시지), stats 생략
    - 이력 있음: 평균 점수 구간별 난이도 중 가장 덜 만난 캐릭터
    """
    return recommend(store, catalog, current["id"]).to_payload()


@router.get("")
def get_all_characters(catalog: Catalog = Depends(get_catalog)):
    return {"success": True, "count": len(catalog.characters), "data": _dump(catalog.characters)}


@router.get("/{character_id}")
def get_character(character_id: str, catalog: Catalog = Depends(get_catalog)):
    return {"success": True, "data": catalog.get_character(character_id).model_dump(mode="json")}
