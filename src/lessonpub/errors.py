"""Exception hierarchy for loading, validating and querying lesson documents"""


class LessonpubError(Exception):
    """Base class for all lessonpub errors."""


class NotFound(LessonpubError):
    """Requested document id is not in the collection."""

    def __init__(self, doc_id: str):
        self.doc_id = doc_id
        super().__init__(f"Document not found: {doc_id}")


class MalformedFrontMatter(LessonpubError):
    """Front matter is missing, unparseable, or lacks a required field."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: malformed front matter: {reason}")


class InvalidQuizReference(LessonpubError):
    """A quiz answer does not point at one of its choices."""

    def __init__(self, path: str, prompt: str, answer_index: int | None, n_choices: int):
        self.path = path
        self.prompt = prompt
        self.answer_index = answer_index
        self.n_choices = n_choices
        answer = "no answer" if answer_index is None else f"answer {answer_index + 1}"
        super().__init__(f"{path}: quiz '{_shorten(prompt)}' has {answer} for {n_choices} choice(s)")


class DuplicateDocumentId(LessonpubError):
    """Two documents resolved to the same id."""

    def __init__(self, doc_id: str, path: str):
        self.doc_id = doc_id
        self.path = path
        super().__init__(f"{path}: duplicate document id '{doc_id}'")


def _shorten(text: str, width: int = 40) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[:width - 3] + "..."
