import pytest

from randcheck.errors import InvalidArgument
from randcheck.utils.coerce import pad_to


def test_scalar_is_broadcast():
    assert pad_to(3, 3) == [3, 3, 3]
    assert pad_to((1, 4), 2) == [(1, 4), (1, 4)]


def test_list_is_padded_with_last_element():
    assert pad_to([1, 2], 4) == [1, 2, 2, 2]


@pytest.mark.parametrize("value, count", [([], 2), ([1, 2, 3], 2)])
def test_bad_override_lists(value, count):
    with pytest.raises(InvalidArgument):
        pad_to(value, count, "lengths")
