"""Slug generation for document identifiers"""

import re


DATED_STEM_RE = re.compile(r'^\d{4}-\d{2}-\d{2}-')


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = text.replace('+', 'p')
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def document_id(stem: str, title: str, published: str) -> str:
    """Build a document id from a dated file stem, else from the publish date and title.

    published is the date part (YYYY-MM-DD) of the document's publish date.
    """
    if DATED_STEM_RE.match(stem):
        return slugify(stem)
    return f"{published}-{slugify(title)}"
