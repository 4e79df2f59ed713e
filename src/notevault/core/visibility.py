"""Visibility rule shared by the share and public link managers."""

from .models.note import Visibility


def recompute_visibility(has_active_shares: bool, has_active_public_link: bool) -> Visibility:
    """Derive a note's visibility from its remaining share and link records.

    An active public link wins over shares; shares win over nothing.
    """
    if has_active_public_link:
        return Visibility.PUBLIC
    if has_active_shares:
        return Visibility.SHARED
    return Visibility.PRIVATE


def promote_for_new_share(current: Visibility) -> Visibility:
    """Visibility after a share is added: PRIVATE becomes SHARED, others stay."""
    if current == Visibility.PRIVATE:
        return Visibility.SHARED
    return current
