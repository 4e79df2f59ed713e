"""
Unit tests for PublicLinkService: token minting, resolution and revocation.
"""

import itertools
import re
import uuid
from datetime import timedelta

import pytest
from sqlalchemy import select

from notevault.config import Settings
from notevault.core.exceptions import ConflictError, ErrorCode, NotFoundError, ValidationError
from notevault.core.models import Note, PublicLink, Share, Visibility
from notevault.core.models.base import utcnow
from notevault.core.services.interfaces import IPublicLinkService
from notevault.core.services.public_link_service import ALPHABET, PublicLinkService, generate_token

TOKEN_RE = re.compile(r"^[A-Za-z0-9]{32}$")


@pytest.fixture
def service(test_session):
    return PublicLinkService(test_session)


def test_implements_interface(service):
    assert isinstance(service, IPublicLinkService)


async def _visibility(session, note_id):
    result = await session.execute(select(Note.visibility).where(Note.id == note_id))
    return result.scalar_one()


def test_generate_token_shape():
    token = generate_token(32)
    assert TOKEN_RE.match(token)
    assert len(ALPHABET) == 62


class TestCreateLink:
    async def test_makes_note_public(self, service, test_session, note, owner):
        link = await service.create_link(note.id, owner.id)

        assert TOKEN_RE.match(link.token)
        assert link.expires_at is None
        assert link.is_active is True
        assert await _visibility(test_session, note.id) == Visibility.PUBLIC

    async def test_many_links_have_distinct_tokens(self, service, note, owner):
        tokens = [(await service.create_link(note.id, owner.id)).token for _ in range(20)]

        assert len(set(tokens)) == 20
        assert all(TOKEN_RE.match(t) for t in tokens)

    async def test_collision_draws_again(self, test_session, note, owner):
        taken = "C" * 32
        test_session.add(PublicLink(note_id=note.id, token=taken))
        await test_session.commit()

        draws = iter([taken, taken, "D" * 32])
        service = PublicLinkService(test_session, token_generator=lambda length: next(draws))

        link = await service.create_link(note.id, owner.id)

        assert link.token == "D" * 32
        tokens = (await test_session.execute(select(PublicLink.token))).scalars().all()
        assert sorted(tokens) == ["C" * 32, "D" * 32]

    async def test_gives_up_after_max_attempts(self, test_session, note, owner):
        note_id, owner_id = note.id, owner.id
        taken = "E" * 32
        test_session.add(PublicLink(note_id=note_id, token=taken))
        await test_session.commit()

        calls = itertools.count()

        def always_taken(length):
            next(calls)
            return taken

        service = PublicLinkService(test_session, token_generator=always_taken)
        service.settings = Settings(_env_file=None, public_link_max_attempts=3)

        with pytest.raises(ConflictError) as exc_info:
            await service.create_link(note_id, owner_id)

        assert exc_info.value.code == ErrorCode.TOKEN_EXHAUSTED
        assert next(calls) == 3
        assert await _visibility(test_session, note_id) == Visibility.PRIVATE

    async def test_expiry_must_be_future(self, service, note, owner):
        with pytest.raises(ValidationError):
            await service.create_link(note.id, owner.id, expires_at=utcnow() - timedelta(seconds=1))

    async def test_non_owner_gets_not_found(self, service, note, recipient):
        with pytest.raises(NotFoundError):
            await service.create_link(note.id, recipient.id)


class TestResolve:
    async def test_active_token_resolves(self, service, note, owner):
        link = await service.create_link(note.id, owner.id, expires_at=utcnow() + timedelta(hours=1))

        resolved = await service.resolve(link.token)

        assert resolved is not None
        assert resolved.id == note.id

    async def test_expired_and_unknown_are_indistinguishable(self, service, test_session, note):
        test_session.add(PublicLink(note_id=note.id, token="X" * 32, expires_at=utcnow() - timedelta(seconds=1)))
        await test_session.commit()

        assert await service.resolve("X" * 32) is None
        assert await service.resolve("Y" * 32) is None

        for token in ("X" * 32, "Y" * 32):
            with pytest.raises(NotFoundError) as exc_info:
                await service.get_public_note(token)
            assert exc_info.value.message == "Note not found"

    @pytest.mark.parametrize("token", ["", "short", "A" * 33, "!" * 32, "a-b_" * 8])
    async def test_malformed_tokens(self, service, token):
        assert await service.resolve(token) is None

    async def test_public_view(self, service, note, owner):
        link = await service.create_link(note.id, owner.id)

        view = await service.get_public_note(link.token)

        assert view.title == "Trip plan"
        assert view.content == "Day 1: train"
        assert view.visibility == Visibility.PUBLIC


class TestDeleteLink:
    async def test_deleted_token_no_longer_resolves(self, service, test_session, note, owner):
        note_id, owner_id = note.id, owner.id
        link = await service.create_link(note_id, owner_id)

        assert await service.delete_link(link.id, owner_id) is True

        assert await service.resolve(link.token) is None
        assert await _visibility(test_session, note_id) == Visibility.PRIVATE

    async def test_recomputes_from_shares(self, service, test_session, note, owner, recipient):
        note_id, owner_id = note.id, owner.id
        test_session.add(Share(note_id=note_id, recipient_id=recipient.id))
        await test_session.commit()
        link = await service.create_link(note_id, owner_id)

        await service.delete_link(link.id, owner_id)

        assert await _visibility(test_session, note_id) == Visibility.SHARED

    async def test_other_active_link_keeps_public(self, service, test_session, note, owner):
        note_id, owner_id = note.id, owner.id
        first = await service.create_link(note_id, owner_id)
        await service.create_link(note_id, owner_id)

        await service.delete_link(first.id, owner_id)

        assert await _visibility(test_session, note_id) == Visibility.PUBLIC
        assert len(await service.list_note_links(note_id, owner_id)) == 1

    async def test_unknown_or_foreign_link(self, service, note, owner, recipient):
        note_id, owner_id, recipient_id = note.id, owner.id, recipient.id
        link = await service.create_link(note_id, owner_id)

        with pytest.raises(NotFoundError) as exc_info:
            await service.delete_link(link.id, recipient_id)
        assert exc_info.value.code == ErrorCode.PUBLIC_LINK_NOT_FOUND

        with pytest.raises(NotFoundError):
            await service.delete_link(uuid.uuid4(), owner_id)
