"""Tests for the SQLite contact repository."""

from datetime import datetime, timezone

import pytest

from domain.entities import ContactPatch
from domain.exceptions import ConflictError
from infrastructure.persistence.contact_repo import escape_like
from infrastructure.persistence.migrations import run_migrations

TS = datetime(2026, 10, 18, 14, 0, tzinfo=timezone.utc)


class TestInsertAndLookup:
    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_created_at(self, repo):
        contact = await repo.insert(ContactPatch(name="Jane Doe", email="jane@x.com"))
        assert contact.id is not None
        assert contact.created_at is not None
        assert contact.phone is None
        assert contact.notes is None

    @pytest.mark.asyncio
    async def test_find_by_email_and_name(self, repo):
        created = await repo.insert(ContactPatch(name="Jane Doe", email="jane@x.com"))
        assert (await repo.find_by_email("jane@x.com")).id == created.id
        assert (await repo.find_by_name("Jane Doe")).id == created.id
        assert await repo.find_by_email("other@x.com") is None
        assert await repo.find_by_name("jane doe") is None

    @pytest.mark.asyncio
    async def test_find_by_name_returns_oldest_when_duplicated(self, repo):
        first = await repo.insert(ContactPatch(name="Alex"))
        await repo.insert(ContactPatch(name="Alex"))
        assert (await repo.find_by_name("Alex")).id == first.id

    @pytest.mark.asyncio
    async def test_last_contacted_round_trips(self, repo):
        contact = await repo.insert(ContactPatch(name="Jane", last_contacted_at=TS))
        fetched = await repo.get_by_id(contact.id)
        assert fetched.last_contacted_at == TS

    @pytest.mark.asyncio
    async def test_duplicate_email_raises_conflict(self, repo):
        await repo.insert(ContactPatch(email="jane@x.com"))
        with pytest.raises(ConflictError):
            await repo.insert(ContactPatch(name="Someone else", email="jane@x.com"))

    @pytest.mark.asyncio
    async def test_null_emails_do_not_conflict(self, repo):
        await repo.insert(ContactPatch(name="A"))
        await repo.insert(ContactPatch(name="B"))
        assert len(await repo.list_all()) == 2

    @pytest.mark.asyncio
    async def test_migrations_are_idempotent(self, connection, repo):
        await repo.insert(ContactPatch(name="Kept"))
        await run_migrations(connection)
        assert [c.name for c in await repo.list_all()] == ["Kept"]


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_update_touches_only_assigned_fields(self, repo):
        contact = await repo.insert(ContactPatch(name="Jane", email="jane@x.com", phone="555"))
        updated = await repo.update(contact.id, ContactPatch(phone="777"))
        assert updated.phone == "777"
        assert updated.name == "Jane"
        assert updated.email == "jane@x.com"

    @pytest.mark.asyncio
    async def test_explicit_none_clears_field(self, repo):
        contact = await repo.insert(ContactPatch(name="Jane", phone="555"))
        updated = await repo.update(contact.id, ContactPatch(phone=None))
        assert updated.phone is None
        assert updated.name == "Jane"

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, repo):
        assert await repo.update(999, ContactPatch(name="x")) is None

    @pytest.mark.asyncio
    async def test_update_to_taken_email_conflicts(self, repo):
        await repo.insert(ContactPatch(email="a@x.com"))
        other = await repo.insert(ContactPatch(email="b@x.com"))
        with pytest.raises(ConflictError):
            await repo.update(other.id, ContactPatch(email="a@x.com"))
        assert (await repo.get_by_id(other.id)).email == "b@x.com"

    @pytest.mark.asyncio
    async def test_delete_returns_deleted_contact(self, repo):
        contact = await repo.insert(ContactPatch(name="Gone"))
        deleted = await repo.delete(contact.id)
        assert deleted.name == "Gone"
        assert await repo.get_by_id(contact.id) is None
        assert await repo.delete(contact.id) is None


class TestSearch:
    @pytest.mark.asyncio
    async def test_matches_any_of_name_email_notes(self, repo):
        by_name = await repo.insert(ContactPatch(name="Jane Doe"))
        by_email = await repo.insert(ContactPatch(name="J. D.", email="jane.d@x.com"))
        by_notes = await repo.insert(ContactPatch(name="Bob", notes="[ts] introduced by jane"))
        await repo.insert(ContactPatch(name="Unrelated", email="u@x.com"))

        found = await repo.search("jane")
        assert [c.id for c in found] == [by_name.id, by_email.id, by_notes.id]

    @pytest.mark.asyncio
    async def test_ascii_matching_is_case_insensitive(self, repo):
        await repo.insert(ContactPatch(name="jane doe"))
        assert len(await repo.search("JANE")) == 1
        assert len(await repo.search("Jane")) == 1

    @pytest.mark.asyncio
    async def test_non_ascii_matching_is_case_sensitive(self, repo):
        await repo.insert(ContactPatch(name="Émile Zola"))
        assert len(await repo.search("Émile")) == 1
        assert await repo.search("émile") == []

    @pytest.mark.asyncio
    async def test_wildcards_in_query_match_literally(self, repo):
        literal = await repo.insert(ContactPatch(name="A", notes="100% sure"))
        await repo.insert(ContactPatch(name="B", notes="1000 items"))
        found = await repo.search("0%")
        assert [c.id for c in found] == [literal.id]

    @pytest.mark.asyncio
    async def test_notes_can_be_excluded(self, repo):
        await repo.insert(ContactPatch(name="Bob", notes="met jane"))
        assert await repo.search("jane", include_notes=False) == []

    @pytest.mark.asyncio
    async def test_no_match_is_empty_list(self, repo):
        await repo.insert(ContactPatch(name="Bob"))
        assert await repo.search("zzz") == []


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
