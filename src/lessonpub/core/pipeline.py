"""Pipeline step functions: load, commit, and export orchestration"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from sqlmodel import Session

from lessonpub.core.collection import DocumentCollection
from lessonpub.core.export import write_doc, write_index
from lessonpub.core.extract.extract import extract_doc
from lessonpub.core.models import Document
from lessonpub.core.parse import discover_files, parse_file
from lessonpub.crud.documents import commit_doc
from lessonpub.errors import DuplicateDocumentId, LessonpubError


logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """A collection plus the errors for every file left out of it."""
    collection: DocumentCollection
    errors: list[LessonpubError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def load_documents(path: Path, parser_config: str = 'gfm-like') -> tuple[list[Document], list[LessonpubError]]:
    """Parse every markdown file under path; failing files are reported, not raised.

    Later files whose id is already taken are reported as DuplicateDocumentId.
    """
    docs: dict[str, Document] = {}
    errors: list[LessonpubError] = []
    for p in discover_files(path):
        try:
            doc = extract_doc(parse_file(p, parser_config))
            if doc.id in docs:
                raise DuplicateDocumentId(doc.id, doc.path)
        except LessonpubError as e:
            logger.warning("Excluding %s: %s", p, e)
            errors.append(e)
            continue
        docs[doc.id] = doc
    logger.info("Loaded %d document(s) from %s, %d excluded", len(docs), path, len(errors))
    return list(docs.values()), errors


def load_collection(path: Path, parser_config: str = 'gfm-like') -> LoadResult:
    """Build a DocumentCollection from a file or directory."""
    docs, errors = load_documents(path, parser_config)
    return LoadResult(DocumentCollection(docs), errors)


def run_commit(
    engine,
    collection: DocumentCollection,
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Upsert every document in the collection.

    Returns (counts, changes) where changes is a list of (status, id) for
    created/updated docs.
    """
    committed_at = datetime.now()
    counts = {"created": 0, "updated": 0, "unchanged": 0}
    changes = []
    with Session(engine) as session:
        for doc in collection.list_all():
            row, status = commit_doc(session, doc, committed_at)
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, row.id))
        session.commit()
    return counts, changes


def run_export(
    collection: DocumentCollection,
    output_dir: Path,
    category: str | None = None,
    ) -> list[tuple[str, Path]]:
    """Write docs (optionally one category) plus index.json. Returns (id, md_path) pairs."""
    docs = list(collection.filter_by_category(category) if category else collection.list_all())
    results = []
    for doc in docs:
        md_path, _ = write_doc(doc, output_dir)
        results.append((doc.id, md_path))
    write_index(docs, output_dir)
    return results
