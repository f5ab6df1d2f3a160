"""DocumentRepository against SQLite: CRUD and timestamp rules."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from docsearch.application.dtos.document import DocumentCreate, DocumentUpdate
from docsearch.domain.exceptions import NotFoundError
from docsearch.infrastructure.persistence.repositories import DocumentRepository


@pytest.fixture
def repo(db_session: AsyncSession) -> DocumentRepository:
    return DocumentRepository(db_session)


async def test_create_then_get_round_trips_fields(repo) -> None:
    created = await repo.create_document(
        DocumentCreate(
            title="Java Guide",
            content="body",
            author="Ann",
            category="doc",
            status="draft",
        )
    )

    fetched = await repo.get_by_id(created.id)

    assert fetched is not None
    assert (fetched.title, fetched.content, fetched.author, fetched.category, fetched.status) == (
        "Java Guide",
        "body",
        "Ann",
        "doc",
        "draft",
    )
    assert fetched.created_at == fetched.updated_at
    assert fetched.created_at.tzinfo is not None


async def test_update_advances_updated_at(repo) -> None:
    created = await repo.create_document(DocumentCreate(title="a"))

    first = await repo.update_document(created.id, DocumentUpdate(status="approved"))
    second = await repo.update_document(created.id, DocumentUpdate(author="Bob"))

    assert first.updated_at > first.created_at
    assert second.updated_at > first.updated_at
    assert second.created_at == created.created_at
    assert (second.title, second.status, second.author) == ("a", "approved", "Bob")


async def test_update_missing_raises(repo) -> None:
    with pytest.raises(NotFoundError):
        await repo.update_document("missing", DocumentUpdate(title="x"))


async def test_delete_missing_returns_false_and_store_unchanged(repo) -> None:
    await repo.create_document(DocumentCreate(title="keep"))

    assert await repo.delete_by_id("does-not-exist") is False
    assert await repo.count() == 1


async def test_delete_existing(repo) -> None:
    created = await repo.create_document(DocumentCreate(title="gone"))

    assert await repo.delete_by_id(created.id) is True
    assert await repo.exists_by_id(created.id) is False
    assert await repo.get_by_id(created.id) is None


async def test_get_all_newest_first_with_paging(repo) -> None:
    ids = [(await repo.create_document(DocumentCreate(title=f"t{i}"))).id for i in range(3)]

    everything = await repo.get_all()
    tail = await repo.get_all(skip=1, limit=1)

    assert [d.id for d in everything] == list(reversed(ids))
    assert [d.id for d in tail] == [ids[1]]


async def test_get_by_ids_skips_unknown(repo) -> None:
    created = await repo.create_document(DocumentCreate(title="x"))
    found = await repo.get_by_ids([created.id, "nope"])
    assert [d.id for d in found] == [created.id]
