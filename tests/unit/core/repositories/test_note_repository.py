"""
Unit tests for NoteRepository listing, access scoping and deletion.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from notevault.core.models import Note, NoteTag, PublicLink, Share, Tag, Visibility
from notevault.core.repositories.note_repository import NoteRepository

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


async def _note(session, owner, title, minutes=0, visibility=Visibility.PRIVATE, labels=()):
    note = Note(
        title=title,
        content=f"{title} body",
        owner_id=owner.id,
        visibility=visibility,
        updated_at=BASE_TIME + timedelta(minutes=minutes),
    )
    session.add(note)
    await session.flush()
    for label in labels:
        tag = (await session.execute(select(Tag).where(func.lower(Tag.label) == func.lower(label)))).scalar_one_or_none()
        if tag is None:
            tag = Tag(label=label)
            session.add(tag)
            await session.flush()
        session.add(NoteTag(note_id=note.id, tag_id=tag.id))
    await session.commit()
    return note


@pytest.fixture
def repo(test_session):
    return NoteRepository(test_session)


class TestListNotes:
    async def test_orders_by_updated_at_desc(self, repo, test_session, owner):
        old = await _note(test_session, owner, "Oldest", minutes=1)
        new = await _note(test_session, owner, "Newest", minutes=3)
        mid = await _note(test_session, owner, "Middle", minutes=2)

        notes, total = await repo.list_notes(owner.id)

        assert total == 3
        assert [n.id for n in notes] == [new.id, mid.id, old.id]

    async def test_ties_break_on_id_desc(self, repo, test_session, owner):
        a = await _note(test_session, owner, "Same time A", minutes=5)
        b = await _note(test_session, owner, "Same time B", minutes=5)

        notes, _ = await repo.list_notes(owner.id)

        expected = sorted([a.id, b.id], key=str, reverse=True)
        assert [str(n.id) for n in notes] == [str(i) for i in expected]

    async def test_title_filter_is_case_insensitive_substring(self, repo, test_session, owner):
        await _note(test_session, owner, "Trip to Lyon")
        await _note(test_session, owner, "Groceries")

        notes, total = await repo.list_notes(owner.id, query="TRIP")

        assert total == 1
        assert notes[0].title == "Trip to Lyon"

    async def test_title_filter_escapes_wildcards(self, repo, test_session, owner):
        await _note(test_session, owner, "100% done")
        await _note(test_session, owner, "100 percent")

        notes, total = await repo.list_notes(owner.id, query="100%")

        assert total == 1
        assert notes[0].title == "100% done"

    async def test_visibility_and_tag_filters_combine(self, repo, test_session, owner):
        await _note(test_session, owner, "Public travel", visibility=Visibility.PUBLIC, labels=["Travel"])
        await _note(test_session, owner, "Private travel", labels=["Travel"])
        await _note(test_session, owner, "Public work", visibility=Visibility.PUBLIC, labels=["Work"])

        notes, total = await repo.list_notes(owner.id, visibility=Visibility.PUBLIC, tag="travel")

        assert total == 1
        assert notes[0].title == "Public travel"
        assert notes[0].tag_labels == ["Travel"]

    async def test_tag_filter_matches_non_ascii_label(self, repo, test_session, owner):
        await _note(test_session, owner, "Summer", labels=["Été"])
        await _note(test_session, owner, "Winter", labels=["Hiver"])

        notes, total = await repo.list_notes(owner.id, tag="Été")

        assert total == 1
        assert notes[0].title == "Summer"

    async def test_pagination_reports_total(self, repo, test_session, owner):
        for i in range(5):
            await _note(test_session, owner, f"Note {i}", minutes=i)

        page1, total = await repo.list_notes(owner.id, page=1, per_page=2)
        page3, _ = await repo.list_notes(owner.id, page=3, per_page=2)

        assert total == 5
        assert [n.title for n in page1] == ["Note 4", "Note 3"]
        assert [n.title for n in page3] == ["Note 0"]

    async def test_include_shared(self, repo, test_session, owner, recipient):
        mine = await _note(test_session, recipient, "Bob's own", minutes=1)
        shared = await _note(test_session, owner, "Shared to Bob", minutes=2)
        await _note(test_session, owner, "Alice only", minutes=3)
        test_session.add(Share(note_id=shared.id, recipient_id=recipient.id))
        await test_session.commit()

        owned_only, owned_total = await repo.list_notes(recipient.id)
        both, both_total = await repo.list_notes(recipient.id, include_shared=True)
        shared_only, shared_total = await repo.list_shared_with_user(recipient.id)

        assert owned_total == 1 and owned_only[0].id == mine.id
        assert both_total == 2
        assert [n.id for n in both] == [shared.id, mine.id]
        assert shared_total == 1 and shared_only[0].id == shared.id


class TestAccessScoping:
    async def test_owner_scoped_lookup(self, repo, note, owner, recipient):
        assert await repo.get_by_id_and_owner(note.id, owner.id) is not None
        assert await repo.get_by_id_and_owner(note.id, recipient.id) is None

    async def test_readable_by_share_recipient(self, repo, test_session, note, recipient, stranger):
        test_session.add(Share(note_id=note.id, recipient_id=recipient.id))
        await test_session.commit()

        assert await repo.get_readable_by_user(note.id, recipient.id) is not None
        assert await repo.get_readable_by_user(note.id, stranger.id) is None


class TestReplaceTagsAndDelete:
    async def test_replace_tags(self, repo, test_session, owner):
        note = await _note(test_session, owner, "Tagged", labels=["a", "b"])
        tag_c = Tag(label="c")
        test_session.add(tag_c)
        await test_session.flush()

        await repo.replace_tags(note.id, [tag_c.id, tag_c.id])
        await test_session.commit()
        reloaded = await repo.get_by_id(note.id)
        assert reloaded.tag_labels == ["c"]

        await repo.replace_tags(note.id, [])
        await test_session.commit()
        reloaded = await repo.get_by_id(note.id)
        assert reloaded.tags == []

    async def test_delete_cascades(self, repo, test_session, owner, recipient):
        note = await _note(test_session, owner, "Doomed", labels=["x"])
        test_session.add(Share(note_id=note.id, recipient_id=recipient.id))
        test_session.add(PublicLink(note_id=note.id, token="T" * 32))
        await test_session.commit()

        assert await repo.delete_note(note.id, recipient.id) is False
        assert await repo.delete_note(note.id, owner.id) is True
        await test_session.commit()

        for model in (Note, NoteTag, Share, PublicLink):
            count = (await test_session.execute(select(func.count()).select_from(model))).scalar()
            assert count == 0, model.__name__
        # tags are global and survive
        assert (await test_session.execute(select(func.count(Tag.id)))).scalar() == 1
