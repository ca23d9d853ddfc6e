"""Tests for contact resolution (upsert-with-merge), search and CRUD."""

from datetime import datetime, timedelta, timezone

import pytest

from application.services.contacts import ContactService
from domain.entities import ContactPatch
from domain.exceptions import ConflictError, NotFoundError, ValidationError

T1 = datetime(2026, 10, 17, 10, 0, tzinfo=timezone.utc)
T2 = T1 + timedelta(days=1)


class RacingRepository:
    """Hides the email match from the first ``hide`` lookups.

    Simulates a concurrent request inserting the same email between our
    lookup and our insert.
    """

    def __init__(self, inner, hide: int = 1):
        self._inner = inner
        self._hide = hide

    async def find_by_email(self, email):
        if self._hide > 0:
            self._hide -= 1
            return None
        return await self._inner.find_by_email(email)

    def __getattr__(self, name):
        return getattr(self._inner, name)


class TestResolveContactCreate:
    @pytest.mark.asyncio
    async def test_creates_with_timestamped_note(self, service, repo):
        outcome = await service.resolve_contact(
            email="a@x.com", new_notes="met at conf", interaction_at=T1,
        )
        assert outcome.action == "created"
        assert outcome.contact.notes == "[2026-10-17T10:00:00.000Z] met at conf"
        assert outcome.contact.last_contacted_at == T1
        assert len(await repo.list_all()) == 1

    @pytest.mark.asyncio
    async def test_creates_without_notes(self, service):
        outcome = await service.resolve_contact(name="Jane", interaction_at=T1)
        assert outcome.action == "created"
        assert outcome.contact.notes is None
        assert outcome.contact.last_contacted_at == T1

    @pytest.mark.asyncio
    async def test_requires_name_or_email(self, service, repo):
        with pytest.raises(ValidationError):
            await service.resolve_contact(interaction_at=T1)
        with pytest.raises(ValidationError):
            await service.resolve_contact(name="  ", email="", phone="555", interaction_at=T1)
        assert await repo.list_all() == []


class TestResolveContactMerge:
    @pytest.mark.asyncio
    async def test_same_email_twice_merges_notes_in_order(self, service, repo):
        await service.resolve_contact(
            email="a@x.com", name="Ann", new_notes="first chat", interaction_at=T1,
        )
        outcome = await service.resolve_contact(
            email="a@x.com", phone="555", new_notes="second chat", interaction_at=T2,
        )

        assert outcome.action == "updated"
        contacts = await repo.list_all()
        assert len(contacts) == 1
        contact = contacts[0]
        assert contact.notes == (
            "[2026-10-17T10:00:00.000Z] first chat"
            "\n\n"
            "[2026-10-18T10:00:00.000Z] second chat"
        )
        assert contact.name == "Ann"
        assert contact.phone == "555"
        assert contact.last_contacted_at == T2

    @pytest.mark.asyncio
    async def test_later_non_empty_values_override(self, service):
        await service.resolve_contact(email="a@x.com", name="Ann", phone="111", interaction_at=T1)
        outcome = await service.resolve_contact(
            email="a@x.com", name="Ann Smith", phone="", interaction_at=T2,
        )
        assert outcome.contact.name == "Ann Smith"
        assert outcome.contact.phone == "111"

    @pytest.mark.asyncio
    async def test_matches_by_name_when_no_email(self, service, repo):
        await service.resolve_contact(name="Jane", interaction_at=T1)
        outcome = await service.resolve_contact(name="Jane", phone="555", interaction_at=T2)

        assert outcome.action == "updated"
        contacts = await repo.list_all()
        assert len(contacts) == 1
        assert contacts[0].phone == "555"
        assert contacts[0].notes == "[2026-10-18T10:00:00.000Z] Contact interaction"

    @pytest.mark.asyncio
    async def test_email_match_wins_over_name_match(self, service, repo):
        by_name = await repo.insert(ContactPatch(name="Sam"))
        by_email = await repo.insert(ContactPatch(name="Samuel", email="sam@x.com"))

        outcome = await service.resolve_contact(name="Sam", email="sam@x.com", interaction_at=T1)

        assert outcome.contact.id == by_email.id
        assert (await repo.get_by_id(by_name.id)).notes is None

    @pytest.mark.asyncio
    async def test_name_fallback_when_email_unknown_adds_email(self, service, repo):
        existing = await repo.insert(ContactPatch(name="Sam"))
        outcome = await service.resolve_contact(name="Sam", email="sam@x.com", interaction_at=T1)
        assert outcome.action == "updated"
        assert outcome.contact.id == existing.id
        assert outcome.contact.email == "sam@x.com"


class TestResolveContactRace:
    @pytest.mark.asyncio
    async def test_conflicting_insert_is_retried_as_update(self, repo):
        await repo.insert(ContactPatch(email="a@x.com", notes="[x] earlier"))
        service = ContactService(RacingRepository(repo, hide=1))

        outcome = await service.resolve_contact(
            email="a@x.com", new_notes="second", interaction_at=T1,
        )

        assert outcome.action == "updated"
        contacts = await repo.list_all()
        assert len(contacts) == 1
        assert contacts[0].notes == "[x] earlier\n\n[2026-10-17T10:00:00.000Z] second"

    @pytest.mark.asyncio
    async def test_conflict_surfaces_when_retry_finds_nothing(self, repo):
        await repo.insert(ContactPatch(email="a@x.com"))
        service = ContactService(RacingRepository(repo, hide=2))

        with pytest.raises(ConflictError):
            await service.resolve_contact(email="a@x.com", interaction_at=T1)
        assert len(await repo.list_all()) == 1


class TestSearchContacts:
    @pytest.mark.asyncio
    async def test_returns_matches_and_count(self, service):
        await service.resolve_contact(name="Jane Doe", interaction_at=T1)
        await service.resolve_contact(name="Bob", new_notes="lunch with Jane", interaction_at=T1)
        await service.resolve_contact(name="Carl", interaction_at=T1)

        outcome = await service.search_contacts("jane")

        assert outcome.count == 2
        assert {c.name for c in outcome.results} == {"Jane Doe", "Bob"}

    @pytest.mark.asyncio
    async def test_empty_result_is_not_an_error(self, service):
        outcome = await service.search_contacts("nobody")
        assert outcome.count == 0
        assert outcome.to_dict() == {"results": [], "count": 0}

    @pytest.mark.asyncio
    async def test_blank_query_rejected(self, service):
        with pytest.raises(ValidationError):
            await service.search_contacts("   ")


class TestCrud:
    @pytest.mark.asyncio
    async def test_create_requires_name_or_email(self, service):
        with pytest.raises(ValidationError):
            await service.create_contact(ContactPatch(phone="555"))

    @pytest.mark.asyncio
    async def test_create_does_not_merge(self, service):
        await service.create_contact(ContactPatch(email="a@x.com"))
        with pytest.raises(ConflictError):
            await service.create_contact(ContactPatch(email="a@x.com"))

    @pytest.mark.asyncio
    async def test_create_normalises_empty_strings(self, service):
        contact = await service.create_contact(ContactPatch(name="Ann", email="", phone=""))
        assert contact.email is None
        assert contact.phone is None
        assert contact.last_contacted_at is None

    @pytest.mark.asyncio
    async def test_list_filter_ignores_notes(self, service):
        await service.create_contact(ContactPatch(name="Ann", notes="knows jane"))
        await service.create_contact(ContactPatch(name="Jane"))
        assert [c.name for c in await service.list_contacts("jane")] == ["Jane"]
        assert len(await service.list_contacts()) == 2

    @pytest.mark.asyncio
    async def test_update_and_delete_missing_raise_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.update_contact(42, ContactPatch(name="x"))
        with pytest.raises(NotFoundError):
            await service.delete_contact(42)
        with pytest.raises(NotFoundError):
            await service.get_contact(42)
