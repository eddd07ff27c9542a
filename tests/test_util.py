import pytest

from petcare.utils.util import MAX_ID, parse_id


@pytest.mark.parametrize(
    ('raw', 'expected'),
    [
        ('42', 42),
        (42, 42),
        (' 7 ', 7),
        (str(MAX_ID), MAX_ID),
        (str(MAX_ID + 1), None),
        ('99999999999999999999', None),
        (10 ** 20, None),
        ('0', None),
        (-3, None),
        ('abc', None),
        (True, None),
        (None, None),
    ],
)
def test_parse_id_accepts_only_storable_positive_integers(raw, expected) -> None:
    assert parse_id(raw) == expected
