import json
import logging

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from rapidfuzz.distance import JaroWinkler


logger = logging.getLogger(__name__)

GAZETTEER_PATH = Path(__file__).parent / 'data' / 'cities.json'

# Ниже этого порога город считается не найденным
CITY_SIMILARITY_THRESHOLD = 0.15

SUBJECT_MASK = 0xFF
COUNTY_MASK = 0xFFFF


def make_city_id(county_id: int, subject_id: int, city_index: int) -> int:
    return county_id << 16 | subject_id << 8 | city_index


@dataclass(frozen=True)
class City:
    id: int
    name: str
    subject: str
    county: str

    @property
    def county_id(self) -> int:
        return self.id >> 16

    @property
    def subject_id(self) -> int:
        return (self.id >> 8) & SUBJECT_MASK

    def __str__(self) -> str:
        return f'{self.county} ФО, {self.subject}, {self.name}'


def subject_range(city_id: int) -> tuple[int, int]:
    """Диапазон id городов того же субъекта"""
    low = city_id & ~SUBJECT_MASK
    return low, low | SUBJECT_MASK


def county_range(city_id: int) -> tuple[int, int]:
    """Диапазон id городов того же федерального округа"""
    low = city_id & ~COUNTY_MASK
    return low, low | COUNTY_MASK


class Gazetteer:
    """Неизменяемый справочник городов, загружается один раз"""

    def __init__(self, cities: list[City]) -> None:
        self._cities = {city.id: city for city in cities}
        self._city_names = {city.name for city in cities}
        self._subjects = {city.subject for city in cities}
        self._counties = {city.county for city in cities}

    @classmethod
    def load(cls, path: Path = GAZETTEER_PATH) -> 'Gazetteer':
        with path.open(encoding='utf-8') as f:
            raw = json.load(f)

        cities = []
        for county in raw['counties']:
            for subject in county['subjects']:
                for index, city_name in enumerate(subject['cities'], start=1):
                    cities.append(
                        City(
                            id=make_city_id(county['id'], subject['id'], index),
                            name=city_name,
                            subject=subject['name'],
                            county=county['name'],
                        )
                    )

        logger.info(f'Loaded {len(cities)} cities from {path.name}')
        return cls(cities)

    def __len__(self) -> int:
        return len(self._cities)

    def get(self, city_id: int) -> City:
        try:
            return self._cities[city_id]
        except KeyError:
            raise ValueError(f'city {city_id} not found') from None

    def city_exists(self, name: str) -> bool:
        return name in self._city_names

    def subject_exists(self, name: str) -> bool:
        return name in self._subjects

    def county_exists(self, name: str) -> bool:
        return name in self._counties

    def resolve_city(self, query: str) -> Optional[City]:
        """Самый похожий по Джаро-Винклеру город или None.

        При равной похожести выигрывает меньшее по алфавиту название, затем меньший id.
        """
        query = query.strip().lower()
        if not query:
            return None

        best = min(
            self._cities.values(),
            key=lambda city: (-JaroWinkler.similarity(query, city.name.lower()), city.name, city.id),
        )
        similarity = JaroWinkler.similarity(query, best.name.lower())
        logger.info(f'Best city for {query!r}: {best.name} ({similarity:.3f})')

        if similarity > CITY_SIMILARITY_THRESHOLD:
            return best
        return None

    def format_city(self, city_id: Optional[int]) -> str:
        if city_id is None:
            return 'Город не указан'
        return str(self.get(city_id))


@lru_cache(maxsize=1)
def get_gazetteer() -> Gazetteer:
    return Gazetteer.load()


def resolve_city(text: str) -> Optional[City]:
    return get_gazetteer().resolve_city(text)
