"""
Unit tests for the visibility rule.
"""

import pytest

from notevault.core.models.note import Visibility
from notevault.core.visibility import promote_for_new_share, recompute_visibility


@pytest.mark.parametrize(
    "has_shares, has_link, expected",
    [
        (False, False, Visibility.PRIVATE),
        (True, False, Visibility.SHARED),
        (False, True, Visibility.PUBLIC),
        (True, True, Visibility.PUBLIC),
    ],
)
def test_recompute_visibility(has_shares, has_link, expected):
    assert recompute_visibility(has_shares, has_link) == expected


def test_new_share_promotes_private_only():
    assert promote_for_new_share(Visibility.PRIVATE) == Visibility.SHARED
    assert promote_for_new_share(Visibility.SHARED) == Visibility.SHARED
    assert promote_for_new_share(Visibility.PUBLIC) == Visibility.PUBLIC
