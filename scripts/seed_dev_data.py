"""Seed demo documents from scripts/seed-data.json and index them in every engine.

Skips seeding when the documents table already has rows. Engines that are
not running are reported as failures; the documents stay in the database
and can be pushed later with POST /api/v1/reindex.

Usage:
    python -m scripts.seed_dev_data [path/to/seed-data.json]

Requires: DATABASE_URL (defaults to the local SQLite file). Tables are
created if missing.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from docsearch.application.dtos.document import DocumentCreate
from docsearch.application.use_cases.documents import DocumentService
from docsearch.application.use_cases.indexing import IndexingService
from docsearch.core.config import get_settings
from docsearch.infrastructure.persistence import database
from docsearch.infrastructure.persistence.repositories import DocumentRepository
from docsearch.infrastructure.search import build_search_clients, close_search_clients


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def run(path: Path) -> None:
    _load_env()
    settings = get_settings()
    data = json.loads(path.read_text(encoding="utf-8"))
    documents = data.get("documents", [])

    await database.create_all()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)

    clients = build_search_clients(settings)
    try:
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                repo = DocumentRepository(session)
                existing = await repo.count()
                if existing:
                    print(f"Database already has {existing} document(s); skipping seed.")
                    return
                service = DocumentService(repo)
                for doc in documents:
                    created = await service.create_document(DocumentCreate(**doc))
                    print(f"  Document {created.title!r} -> {created.id}")

        async with database.AsyncSessionLocal() as session:
            result = await IndexingService(
                DocumentRepository(session), clients, batch_size=settings.index_batch_size
            ).reindex_all()
        print(
            f"Indexed {result.success_count} of {result.total_documents} document(s) "
            f"({result.failure_count} failed)"
        )
    finally:
        await close_search_clients(clients)
        await database.dispose_engine()

    print("Seed completed.")


def main() -> None:
    root = _project_root()
    path_arg = sys.argv[1] if len(sys.argv) > 1 else None
    path = Path(path_arg) if path_arg else root / "scripts" / "seed-data.json"
    if not path.is_absolute():
        path = (root / path).resolve()
    asyncio.run(run(path))


if __name__ == "__main__":
    main()
