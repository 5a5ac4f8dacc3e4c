"""Read-only, ordered access to a set of loaded documents"""

from typing import Callable, Iterable, Iterator

from lessonpub.core.models import Document
from lessonpub.errors import DuplicateDocumentId, NotFound


def default_order_key(doc: Document) -> tuple[float, str]:
    """Sort key: publish date descending, then id ascending."""
    return (-doc.publish_date.timestamp(), doc.id)


class DocumentQuery:
    """A lazy, restartable view over a collection; every iteration re-runs the query."""

    def __init__(self, docs: tuple[Document, ...], predicate: Callable[[Document], bool] | None = None):
        self._docs = docs
        self._predicate = predicate

    def __iter__(self) -> Iterator[Document]:
        for doc in self._docs:
            if self._predicate is None or self._predicate(doc):
                yield doc

    def __repr__(self) -> str:
        return f"DocumentQuery({[d.id for d in self]})"


class DocumentCollection:
    """Immutable set of documents keyed by id, held in default display order."""

    def __init__(self, docs: Iterable[Document] = ()):
        by_id: dict[str, Document] = {}
        for doc in docs:
            if doc.id in by_id:
                raise DuplicateDocumentId(doc.id, doc.path)
            by_id[doc.id] = doc
        self._by_id = by_id
        self._ordered = tuple(sorted(by_id.values(), key=default_order_key))

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._by_id

    def __iter__(self) -> Iterator[Document]:
        return iter(self._ordered)

    def list_all(self) -> DocumentQuery:
        """All documents, newest first; ties broken by id."""
        return DocumentQuery(self._ordered)

    def get_by_id(self, doc_id: str) -> Document:
        try:
            return self._by_id[doc_id]
        except KeyError:
            raise NotFound(doc_id) from None

    def filter_by_category(self, category: str) -> DocumentQuery:
        """Documents listing category (exact match), in default order."""
        return DocumentQuery(self._ordered, lambda d: category in d.categories)

    def filter_by_tag(self, tag: str) -> DocumentQuery:
        return DocumentQuery(self._ordered, lambda d: tag in d.tags)

    def categories(self) -> list[str]:
        return sorted({c for d in self._ordered for c in d.categories})

    def tags(self) -> list[str]:
        return sorted({t for d in self._ordered for t in d.tags})
