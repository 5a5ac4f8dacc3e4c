"""Convert a ParsedDoc into an immutable Document"""

from lessonpub.core.extract.blocks import tokens_to_blocks
from lessonpub.core.extract.quiz import assemble_quizzes
from lessonpub.core.models import Document, ParsedDoc
from lessonpub.core.parse import build_front_matter
from lessonpub.core.utils.slug import document_id


def extract_doc(parsed: ParsedDoc) -> Document:
    """Validate front matter, derive the id, and convert tokens into body blocks."""
    path = str(parsed.path)
    fm = build_front_matter(parsed.frontmatter, path)
    source_lines = parsed.markdown.splitlines(keepends=True)
    body = assemble_quizzes(tokens_to_blocks(parsed.tokens, source_lines), path)

    return Document(
        id=document_id(parsed.path.stem, fm.title, fm.publish_date.strftime('%Y-%m-%d')),
        path=path,
        front_matter=fm,
        raw_markdown=parsed.raw_markdown,
        markdown=parsed.markdown,
        hash=parsed.hash,
        body=body,
    )
