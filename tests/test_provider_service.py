import pytest

from petcare.services import provider_service


@pytest.mark.parametrize(
    ('payload', 'expected'),
    [
        ({'user_id': 3}, 3),
        ({'userId': '4'}, 4),
        ({'user': {'id': '5'}}, 5),
        ({'usuario': '6'}, 6),
        ({'userId': 'bad', 'usuario': '8'}, 8),
        ({'name': 'No link'}, None),
        ({'user': None}, None),
    ],
)
def test_normalize_provider_user_folds_legacy_keys(payload, expected) -> None:
    assert provider_service.normalize_provider_user(payload) == expected


def test_create_provider_stores_normalized_user(data) -> None:
    assert data.provider.user_id == data.provider_user.id
    assert data.unlinked_provider.user_id is None


def test_find_one_and_find_one_by_user_id(data) -> None:
    assert provider_service.find_one(str(data.provider.id)).name == 'Clinica Bruno'
    assert provider_service.find_one('x') is None
    assert provider_service.find_one_by_user_id(str(data.provider_user.id)).id == data.provider.id
    assert provider_service.find_one_by_user_id(data.tutor_user.id) is None
