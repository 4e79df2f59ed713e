"""
Unit tests for AccessEvaluator and Principal.
"""

import uuid
from datetime import timedelta

import pytest

from notevault.core.exceptions import NotFoundError
from notevault.core.models import Note, PublicLink, Share
from notevault.core.models.base import utcnow
from notevault.core.services.access_service import AccessEvaluator, Principal


@pytest.fixture
def access(test_session):
    return AccessEvaluator(test_session)


def test_principal_constructors():
    user_id = uuid.uuid4()
    assert not Principal.for_user(user_id).is_anonymous
    assert Principal.anonymous("t" * 32).is_anonymous
    assert Principal.anonymous().public_token is None


class TestCanRead:
    async def test_owner_and_recipient(self, access, test_session, note, owner, recipient, stranger):
        test_session.add(Share(note_id=note.id, recipient_id=recipient.id))
        await test_session.commit()

        assert await access.can_read(note, Principal.for_user(owner.id))
        assert await access.can_read(note, Principal.for_user(recipient.id))
        assert not await access.can_read(note, Principal.for_user(stranger.id))

    async def test_anonymous_needs_active_link_for_this_note(self, access, test_session, note, owner):
        other = Note(title="Other note", owner_id=owner.id)
        test_session.add(other)
        await test_session.flush()
        test_session.add_all(
            [
                PublicLink(note_id=note.id, token="A" * 32),
                PublicLink(note_id=note.id, token="B" * 32, expires_at=utcnow() - timedelta(seconds=1)),
                PublicLink(note_id=other.id, token="C" * 32),
            ]
        )
        await test_session.commit()

        assert await access.can_read(note, Principal.anonymous("A" * 32))
        assert not await access.can_read(note, Principal.anonymous("B" * 32))
        assert not await access.can_read(note, Principal.anonymous("C" * 32))
        assert not await access.can_read(note, Principal.anonymous())


class TestCanWrite:
    async def test_owner_only(self, access, test_session, note, owner, recipient):
        test_session.add(Share(note_id=note.id, recipient_id=recipient.id))
        await test_session.commit()

        assert access.can_write(note, Principal.for_user(owner.id))
        assert not access.can_write(note, Principal.for_user(recipient.id))
        assert not access.can_write(note, Principal.anonymous("A" * 32))


class TestLookups:
    async def test_readable_note_hides_existence(self, access, note, owner, stranger):
        assert (await access.get_readable_note(note.id, Principal.for_user(owner.id))).id == note.id

        with pytest.raises(NotFoundError) as missing:
            await access.get_readable_note(uuid.uuid4(), Principal.for_user(owner.id))
        with pytest.raises(NotFoundError) as forbidden:
            await access.get_readable_note(note.id, Principal.for_user(stranger.id))

        assert missing.value.message == forbidden.value.message

    async def test_readable_note_by_token(self, access, test_session, note):
        test_session.add(PublicLink(note_id=note.id, token="K" * 32))
        await test_session.commit()

        found = await access.get_readable_note(note.id, Principal.anonymous("K" * 32))
        assert found.id == note.id
        with pytest.raises(NotFoundError):
            await access.get_readable_note(note.id, Principal.anonymous("L" * 32))

    async def test_owned_note(self, access, note, owner, recipient):
        assert (await access.get_owned_note(note.id, owner.id)).id == note.id
        with pytest.raises(NotFoundError):
            await access.get_owned_note(note.id, recipient.id)
