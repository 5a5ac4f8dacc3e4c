"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from lessonpub.config import Settings, load_config
from lessonpub.core.collection import DocumentCollection
from lessonpub.core.export import build_sidecar, emit_markdown
from lessonpub.core.pipeline import load_collection, run_commit, run_export
from lessonpub.crud.database import init_db, make_engine, reset_db
from lessonpub.crud.documents import load_from_db
from lessonpub.errors import LessonpubError, NotFound

PathArg = Annotated[Optional[str], typer.Argument(help="File or directory of posts (default: content_dir)")]
FromDb = Annotated[bool, typer.Option("--db", help="Read committed documents from the database")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _source(path: Optional[str], settings: Settings) -> Path:
    src = Path(path or settings.content_dir)
    if not src.exists():
        _fail(f"No such file or directory: {src}")
    return src


def _echo_errors(errors: list[LessonpubError]) -> None:
    for e in errors:
        typer.echo(f"  excluded: {e}", err=True)


def _collection(path: Optional[str], from_db: bool, settings: Settings) -> DocumentCollection:
    """Load documents from disk (reporting exclusions) or from the database."""
    if from_db:
        engine = make_engine(settings.db_url)
        init_db(engine)
        try:
            with Session(engine) as session:
                return load_from_db(session, settings.parser_config)
        except LessonpubError as e:
            _fail("Stored documents failed to load", e)
    result = load_collection(_source(path, settings), settings.parser_config)
    _echo_errors(result.errors)
    return result.collection


def main_callback(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")] = None,
    ):
    """Load, check, store and export lesson posts."""
    settings = _settings(overrides={"log_level": log_level})
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def check_cmd(path: PathArg = None):
    """Validate every post; exit 1 if any file is excluded."""
    settings = _settings()
    result = load_collection(_source(path, settings), settings.parser_config)
    for e in result.errors:
        typer.echo(f"  {type(e).__name__}: {e}")
    typer.echo(
        f"Check complete - {len(result.collection)} loaded, {len(result.errors)} excluded"
    )
    if not result.ok:
        raise typer.Exit(1)


def list_cmd(
    path: PathArg = None,
    category: Annotated[Optional[str], typer.Option("--category", help="Only documents in this category")] = None,
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only documents with this tag")] = None,
    from_db: FromDb = False,
    ):
    """List documents newest first."""
    settings = _settings()
    collection = _collection(path, from_db, settings)
    if category:
        docs = collection.filter_by_category(category)
    elif tag:
        docs = collection.filter_by_tag(tag)
    else:
        docs = collection.list_all()

    docs = list(docs)
    if not docs:
        typer.echo("No documents found.")
        raise typer.Exit(1)
    for d in docs:
        typer.echo(f"{d.publish_date:%Y-%m-%d}  {d.id}  {d.title}  [{', '.join(d.categories)}]")


def show_cmd(
    doc_id: Annotated[str, typer.Argument(help="Document id")],
    path: PathArg = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the sidecar JSON instead of markdown")] = False,
    from_db: FromDb = False,
    ):
    """Print one document with normalized front matter."""
    settings = _settings()
    collection = _collection(path, from_db, settings)
    try:
        doc = collection.get_by_id(doc_id)
    except NotFound as e:
        _fail(str(e))
    if as_json:
        typer.echo(json.dumps(build_sidecar(doc), indent=2, ensure_ascii=False))
    else:
        typer.echo(emit_markdown(doc), nl=False)


def quiz_cmd(
    doc_id: Annotated[str, typer.Argument(help="Document id")],
    path: PathArg = None,
    answers: Annotated[bool, typer.Option("--answers", help="Reveal answers and explanations")] = False,
    from_db: FromDb = False,
    ):
    """Print a document's quiz questions."""
    settings = _settings()
    collection = _collection(path, from_db, settings)
    try:
        doc = collection.get_by_id(doc_id)
    except NotFound as e:
        _fail(str(e))

    quizzes = doc.quizzes
    if not quizzes:
        typer.echo(f"No quiz questions in {doc.id}.")
        raise typer.Exit(1)
    for n, q in enumerate(quizzes, start=1):
        typer.echo(f"Q{n}. {q.prompt}")
        if q.code_sample:
            typer.echo(q.code_sample.text)
        for i, choice in enumerate(q.choices, start=1):
            typer.echo(f"  {i}. " + choice.replace("\n", "\n     "))
        if answers:
            typer.echo(f"  Answer: {q.answer_number}")
            typer.echo(f"  {q.explanation}")
        typer.echo("")


def categories_cmd(path: PathArg = None, from_db: FromDb = False):
    """List categories with their document counts."""
    settings = _settings()
    collection = _collection(path, from_db, settings)
    cats = collection.categories()
    if not cats:
        typer.echo("No categories found.")
        raise typer.Exit(1)
    for c in cats:
        typer.echo(f"{c} ({len(list(collection.filter_by_category(c)))})")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def _commit(path: Optional[str], settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    result = load_collection(_source(path, settings), settings.parser_config)
    _echo_errors(result.errors)
    try:
        counts, changes = run_commit(engine, result.collection)
    except Exception as e:
        _fail("Commit failed", e)
    for status, doc_id in changes:
        typer.echo(f"  {status}: {doc_id}")
    typer.echo(
        f"Commit complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged, "
        f"{len(result.errors)} excluded"
    )
    return result.collection


def _export(collection: DocumentCollection, settings: Settings, category: Optional[str] = None) -> None:
    output_dir = Path(settings.output_dir)
    try:
        results = run_export(collection, output_dir, category)
    except OSError as e:
        _fail("Export failed", e)
    for doc_id, md_path in results:
        typer.echo(f"  {doc_id} -> {md_path}")
    typer.echo(f"Exported {len(results)} document(s) to {output_dir}/")


def commit_cmd(path: PathArg = None):
    """Load posts and upsert them into the database."""
    _commit(path, _settings())


def export_cmd(
    path: PathArg = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    category: Annotated[Optional[str], typer.Option("--category", help="Export only this category")] = None,
    from_db: FromDb = False,
    ):
    """Write normalized markdown + sidecar JSON + index.json."""
    settings = _settings(overrides={"output_dir": out})
    _export(_collection(path, from_db, settings), settings, category)


def build_cmd(
    path: PathArg = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Run the full pipeline: load -> commit -> export."""
    settings = _settings(overrides={"output_dir": out})
    collection = _commit(path, settings)
    _export(collection, settings)
