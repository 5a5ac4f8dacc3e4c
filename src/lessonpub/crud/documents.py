"""Document persistence: upsert by id, lookups, and rehydration into a collection"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import func
from sqlmodel import Session, select

from lessonpub.core.collection import DocumentCollection
from lessonpub.core.extract.extract import extract_doc
from lessonpub.core.models import Document
from lessonpub.core.parse import parse_text
from lessonpub.crud.models import DocumentRow
from lessonpub.errors import NotFound


logger = logging.getLogger(__name__)


def _row_fields(doc: Document) -> dict:
    return {
        "title": doc.title,
        "publish_date": doc.publish_date.astimezone(timezone.utc),
        "categories": list(doc.categories),
        "tags": list(doc.front_matter.tags),
        "math": doc.math,
        "path": doc.path,
        "raw_markdown": doc.raw_markdown,
        "hash": doc.hash,
        "quiz_count": len(doc.quizzes),
        "front_matter_extra": dict(doc.front_matter.model_extra or {}) or None,
    }


def _ordered():
    return select(DocumentRow).order_by(DocumentRow.publish_date.desc(), DocumentRow.id)


def get_by_id(session: Session, doc_id: str) -> DocumentRow:
    """Return the row for doc_id; raise NotFound when absent."""
    row = session.get(DocumentRow, doc_id)
    if row is None:
        raise NotFound(doc_id)
    return row


def get_by_path(session: Session, path: str) -> DocumentRow | None:
    """Return the row with the given source path, or None if not found."""
    return session.exec(select(DocumentRow).where(DocumentRow.path == path)).one_or_none()


def get_all_documents(session: Session) -> list[DocumentRow]:
    """Return all rows, newest first, ties by id."""
    return list(session.exec(_ordered()).all())


def get_by_category(session: Session, category: str) -> list[DocumentRow]:
    """Return rows listing category, in default order.

    Categories live in a JSON column, so matching happens in Python.
    """
    return [row for row in get_all_documents(session) if category in row.categories]


def list_categories(session: Session) -> list[str]:
    """Return sorted distinct categories across all stored documents."""
    return sorted({c for cats in session.exec(select(DocumentRow.categories)).all() for c in cats})


def get_last_committed(session: Session) -> list[DocumentRow]:
    """Return rows from the most recent commit batch (MAX committed_at)."""
    max_ts = session.exec(select(func.max(DocumentRow.committed_at))).one()
    if max_ts is None:
        return []
    return list(session.exec(_ordered().where(DocumentRow.committed_at == max_ts)).all())


def commit_doc(
    session: Session,
    doc: Document,
    committed_at: datetime | None = None,
    ) -> tuple[DocumentRow, str]:
    """Upsert a loaded Document by id.

    Returns (row, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; caller controls the transaction.
    """
    stale = get_by_path(session, doc.path)
    if stale is not None and stale.id != doc.id:
        # same file, new id (e.g. a retitled undated post)
        logger.debug("re-keyed: %s -> %s", stale.id, doc.id)
        session.delete(stale)
        session.flush()

    row = session.get(DocumentRow, doc.id)

    if row:
        if row.hash == doc.hash:
            logger.debug("unchanged: %s", doc.id)
            return row, 'unchanged'
        for key, value in _row_fields(doc).items():
            setattr(row, key, value)
        row.updated_at = datetime.now()
        row.committed_at = committed_at
        session.add(row)
        session.flush()
        logger.debug("updated: %s", doc.id)
        return row, 'updated'

    row = DocumentRow(id=doc.id, committed_at=committed_at, **_row_fields(doc))
    session.add(row)
    session.flush()
    logger.debug("created: %s", doc.id)
    return row, 'created'


def to_document(row: DocumentRow, parser_config: str = 'gfm-like') -> Document:
    """Re-parse a stored row's raw markdown into a Document."""
    return extract_doc(parse_text(row.raw_markdown, Path(row.path), parser_config))


def load_from_db(session: Session, parser_config: str = 'gfm-like') -> DocumentCollection:
    """Rehydrate every stored row into a DocumentCollection."""
    return DocumentCollection(to_document(row, parser_config) for row in get_all_documents(session))
