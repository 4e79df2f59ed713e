"""
Unit tests for NoteService against an in-memory database.
"""

import uuid

import pytest
from sqlalchemy import func, select

from notevault.core.exceptions import NotFoundError, ValidationError
from notevault.core.models import Note, NoteTag, PublicLink, Share, Tag, Visibility
from notevault.core.schemas.notes import NoteCreate, NoteUpdate
from notevault.core.services.note_service import NoteService
from notevault.core.services.public_link_service import PublicLinkService
from notevault.core.services.sharing_service import SharingService


@pytest.fixture
def service(test_session):
    return NoteService(test_session)


async def _count(session, model):
    return (await session.execute(select(func.count()).select_from(model))).scalar()


class TestCreate:
    async def test_defaults_private_without_tags(self, service, test_session, owner):
        response = await service.create_note(owner.id, NoteCreate(title="  Trip plan  "))

        assert response.title == "Trip plan"
        assert response.content == ""
        assert response.visibility == Visibility.PRIVATE
        assert response.tags == []
        assert response.owner_email == "alice@example.com"
        assert await _count(test_session, Tag) == 0

    async def test_attaches_tags(self, service, owner):
        response = await service.create_note(
            owner.id, NoteCreate(title="Trip plan", tags=["travel", "Lyon", "TRAVEL"])
        )
        assert response.tags == ["Lyon", "travel"]

    @pytest.mark.parametrize("title", ["ab", "  ab  ", "", "x" * 256])
    async def test_title_length(self, service, test_session, owner, title):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_note(owner.id, NoteCreate(title=title))
        assert exc_info.value.field == "title"
        assert await _count(test_session, Note) == 0

    async def test_content_limit(self, service, owner):
        await service.create_note(owner.id, NoteCreate(title="Max", content="c" * 50_000))
        with pytest.raises(ValidationError):
            await service.create_note(owner.id, NoteCreate(title="Too long", content="c" * 50_001))

    async def test_bad_label_writes_nothing(self, service, test_session, owner):
        with pytest.raises(ValidationError):
            await service.create_note(owner.id, NoteCreate(title="Tagged", tags=["ok", "   "]))
        assert await _count(test_session, Note) == 0
        assert await _count(test_session, Tag) == 0


class TestUpdate:
    async def test_tags_none_keeps_and_empty_clears(self, service, owner):
        created = await service.create_note(owner.id, NoteCreate(title="Trip plan", tags=["a", "b"]))

        kept = await service.update_note(created.id, owner.id, NoteUpdate(title="Trip plan v2"))
        assert kept.tags == ["a", "b"]
        assert kept.title == "Trip plan v2"

        replaced = await service.update_note(created.id, owner.id, NoteUpdate(title="Trip plan", tags=["c"]))
        assert replaced.tags == ["c"]

        cleared = await service.update_note(created.id, owner.id, NoteUpdate(title="Trip plan", tags=[]))
        assert cleared.tags == []

    async def test_bumps_updated_at(self, service, owner):
        created = await service.create_note(owner.id, NoteCreate(title="Trip plan"))
        updated = await service.update_note(created.id, owner.id, NoteUpdate(title="Trip plan", tags=["x"]))
        assert updated.updated_at >= created.updated_at

    async def test_non_owner_gets_not_found(self, service, test_session, note, recipient):
        test_session.add(Share(note_id=note.id, recipient_id=recipient.id))
        await test_session.commit()

        with pytest.raises(NotFoundError):
            await service.update_note(note.id, recipient.id, NoteUpdate(title="Hijacked"))

    async def test_visibility_kept_when_omitted(self, service, owner):
        created = await service.create_note(
            owner.id, NoteCreate(title="Shared one", visibility=Visibility.SHARED)
        )
        updated = await service.update_note(created.id, owner.id, NoteUpdate(title="Shared one"))
        assert updated.visibility == Visibility.SHARED

    async def test_declared_visibility_reconciled_by_next_link_change(self, service, test_session, owner, recipient):
        created = await service.create_note(
            owner.id, NoteCreate(title="Announced", visibility=Visibility.PUBLIC)
        )
        assert created.visibility == Visibility.PUBLIC

        await SharingService(test_session).share_with_user(created.id, owner.id, "bob@example.com")
        links = PublicLinkService(test_session)
        link = await links.create_link(created.id, owner.id)
        await links.delete_link(link.id, owner.id)

        note = await test_session.get(Note, created.id)
        await test_session.refresh(note)
        assert note.visibility == Visibility.SHARED


class TestGetAndDelete:
    async def test_get_by_owner_and_recipient_only(self, service, test_session, note, owner, recipient, stranger):
        test_session.add(Share(note_id=note.id, recipient_id=recipient.id))
        await test_session.commit()

        assert (await service.get_note(note.id, owner.id)).is_owner is True
        assert (await service.get_note(note.id, recipient.id)).is_owner is False
        with pytest.raises(NotFoundError):
            await service.get_note(note.id, stranger.id)
        with pytest.raises(NotFoundError):
            await service.get_note(uuid.uuid4(), owner.id)

    async def test_delete_cascades(self, service, test_session, owner, recipient):
        # a failed call rolls back and expires loaded users, so keep plain ids
        owner_id, recipient_id = owner.id, recipient.id
        created = await service.create_note(owner_id, NoteCreate(title="Doomed", tags=["x"]))
        test_session.add(Share(note_id=created.id, recipient_id=recipient_id))
        test_session.add(PublicLink(note_id=created.id, token="Z" * 32))
        await test_session.commit()

        with pytest.raises(NotFoundError):
            await service.delete_note(created.id, recipient_id)

        assert await service.delete_note(created.id, owner_id) is True
        for model in (Note, NoteTag, Share, PublicLink):
            assert await _count(test_session, model) == 0

        with pytest.raises(NotFoundError):
            await service.delete_note(created.id, owner_id)


class TestListing:
    async def test_per_page_is_clamped(self, service, owner):
        for i in range(3):
            await service.create_note(owner.id, NoteCreate(title=f"Note {i}"))

        big = await service.list_for_owner(owner.id, per_page=10_000)
        tiny = await service.list_for_owner(owner.id, page=0, per_page=0)

        assert big.per_page == 100
        assert big.total == 3
        assert tiny.page == 1
        assert tiny.per_page == 1
        assert len(tiny.items) == 1
        assert tiny.has_next is True

    async def test_including_shared_and_tags(self, service, test_session, owner, recipient):
        mine = await service.create_note(recipient.id, NoteCreate(title="Bob notes", tags=["home"]))
        theirs = await service.create_note(owner.id, NoteCreate(title="Alice notes", tags=["work"]))
        test_session.add(Share(note_id=theirs.id, recipient_id=recipient.id))
        await test_session.commit()

        owned = await service.list_for_owner(recipient.id)
        everything = await service.list_for_user_including_shared(recipient.id)
        work = await service.list_for_user_including_shared(recipient.id, tag="WORK")
        shared = await service.list_shared_with_user(recipient.id)

        assert [i.id for i in owned.items] == [mine.id]
        assert {i.id for i in everything.items} == {mine.id, theirs.id}
        assert [i.id for i in work.items] == [theirs.id]
        assert work.items[0].is_owner is False
        assert [i.id for i in shared.items] == [theirs.id]
        assert await service.get_available_tags(recipient.id) == ["home"]
