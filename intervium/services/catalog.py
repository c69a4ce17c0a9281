# intervium/services/catalog.py
"""
읽기 전용 카탈로그 (캐릭터 / 직무).

characters.json, professions.json 을 앱 시작 시 한 번 읽어 불변(frozen)
객체로 만든다. 전역 변수로 두지 않고 app.state.catalog 에 보관한 뒤
deps.get_catalog 로 주입한다.
"""
import json
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from intervium.errors import NotFound

logger = logging.getLogger(__name__)

CHARACTERS_FILE = "characters.json"
PROFESSIONS_FILE = "professions.json"


class Tier(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXTREME = "extreme"


class Character(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    title: str = ""
    description: str = ""
    difficulty: Tier
    badge: Optional[str] = None
    avatar: Optional[str] = None


class Profession(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    keywords: Tuple[str, ...] = ()

    def matches(self, keyword: str) -> bool:
        return (
            keyword in self.name.lower()
            or keyword in self.description.lower()
            or any(keyword in k.lower() for k in self.keywords)
        )


class ProfessionCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: Optional[str] = None
    order: int = 0
    professions: Tuple[Profession, ...] = Field(default_factory=tuple)

    def summary(self) -> dict:
        return {"id": self.id, "name": self.name, "icon": self.icon}


class Catalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    characters: Tuple[Character, ...] = ()
    categories: Tuple[ProfessionCategory, ...] = ()
    popular_badge: str = "MOST POPULAR"

    # ---------- characters ----------
    def by_difficulty(self, tier) -> List[Character]:
        # 알 수 없는 난이도 문자열은 빈 목록
        level = tier.value if isinstance(tier, Tier) else str(tier)
        return [c for c in self.characters if c.difficulty.value == level]

    def popular(self) -> Optional[Character]:
        """Badge holder, else the first entry in catalog order, else None."""
        for c in self.characters:
            if c.badge == self.popular_badge:
                return c
        return self.characters[0] if self.characters else None

    def get_character(self, character_id: str) -> Character:
        for c in self.characters:
            if c.id == character_id:
                return c
        raise NotFound("character_not_found", detail={"characterId": character_id})

    # ---------- professions ----------
    def get_category(self, category_id: str) -> ProfessionCategory:
        for cat in self.categories:
            if cat.id == category_id:
                return cat
        raise NotFound("category_not_found", detail={"categoryId": category_id})

    def find_profession(self, profession_id: str) -> Tuple[Profession, ProfessionCategory]:
        for cat in self.categories:
            for prof in cat.professions:
                if prof.id == profession_id:
                    return prof, cat
        raise NotFound("profession_not_found", detail={"professionId": profession_id})

    def search_professions(self, query: str) -> List[Tuple[Profession, ProfessionCategory]]:
        keyword = query.strip().lower()
        return [
            (prof, cat)
            for cat in self.categories
            for prof in cat.professions
            if prof.matches(keyword)
        ]


def _read_json(path: Path) -> dict:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def load_catalog(catalog_dir: Path, popular_badge: str = "MOST POPULAR") -> Catalog:
    catalog_dir = Path(catalog_dir)
    characters = _read_json(catalog_dir / CHARACTERS_FILE).get("characters", [])
    categories = _read_json(catalog_dir / PROFESSIONS_FILE).get("categories", [])

    catalog = Catalog(
        characters=tuple(Character.model_validate(c) for c in characters),
        categories=tuple(
            sorted(
                (ProfessionCategory.model_validate(c) for c in categories),
                key=lambda cat: cat.order,
            )
        ),
        popular_badge=popular_badge,
    )
    logger.info(
        "[CATALOG] loaded dir=%s characters=%d categories=%d",
        catalog_dir,
        len(catalog.characters),
        len(catalog.categories),
    )
    return catalog
