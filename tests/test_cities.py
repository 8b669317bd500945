import pytest

from src.bvilove.profile.cities import (
    City,
    Gazetteer,
    county_range,
    get_gazetteer,
    make_city_id,
    resolve_city,
    subject_range,
)


MOSCOW = make_city_id(1, 1, 1)
ZELENOGRAD = make_city_id(1, 1, 2)
KHIMKI = make_city_id(1, 2, 2)
KAZAN = make_city_id(5, 37, 1)


def test_gazetteer_loaded_once():
    assert get_gazetteer() is get_gazetteer()
    assert len(get_gazetteer()) > 100


def test_city_lookup():
    city = get_gazetteer().get(MOSCOW)
    assert city.name == 'Москва'
    assert city.county_id == 1
    assert city.subject_id == 1
    assert str(city) == 'Центральный ФО, Москва, Москва'

    with pytest.raises(ValueError):
        get_gazetteer().get(make_city_id(9, 99, 99))


def test_format_city():
    assert get_gazetteer().format_city(None) == 'Город не указан'
    assert get_gazetteer().format_city(KAZAN) == 'Приволжский ФО, Республика Татарстан, Казань'


def test_resolve_exact_name_ignores_case():
    city = resolve_city('москва')
    assert city is not None
    assert city.id == MOSCOW


def test_resolve_typo():
    city = resolve_city('Масква')
    assert city is not None
    assert city.name == 'Москва'


@pytest.mark.parametrize('text', ['', '   ', 'qwerty', 'Moskva'])
def test_resolve_nothing(text):
    assert resolve_city(text) is None


def test_resolve_tie_prefers_name_then_id():
    gazetteer = Gazetteer(
        [
            City(id=7, name='Берёзовский', subject='Б', county='Уральский'),
            City(id=3, name='Берёзовский', subject='А', county='Сибирский'),
        ]
    )
    city = gazetteer.resolve_city('Берёзовский')
    assert city is not None
    assert city.id == 3


def test_ranges():
    low, high = subject_range(MOSCOW)
    assert low <= ZELENOGRAD <= high
    assert not low <= KHIMKI <= high

    low, high = county_range(MOSCOW)
    assert low <= KHIMKI <= high
    assert not low <= KAZAN <= high
