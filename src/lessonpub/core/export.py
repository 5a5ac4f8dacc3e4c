"""Export: re-serialize front matter, build sidecar JSON, and write output files"""

import json
from pathlib import Path
from typing import Any, Iterable

import yaml

from lessonpub.core.models import Document, FrontMatter


def front_matter_dict(fm: FrontMatter) -> dict[str, Any]:
    """Front matter in canonical key order: title, date, categories, tags, math, then extras."""
    data: dict[str, Any] = {"title": fm.title, "date": fm.date, "categories": list(fm.categories)}
    if fm.tags:
        data["tags"] = list(fm.tags)
    if fm.math:
        data["math"] = True
    data.update(fm.model_extra or {})
    return data


def emit_front_matter(fm: FrontMatter) -> str:
    """Render a `---` delimited YAML block; lists in flow style, date text verbatim."""
    header = yaml.safe_dump(
        front_matter_dict(fm),
        default_flow_style=None,
        allow_unicode=True,
        sort_keys=False,
        width=float("inf"),
    )
    return f"---\n{header}---\n"


def emit_markdown(doc: Document) -> str:
    """Return the document's body with its normalized front matter prepended."""
    return f"{emit_front_matter(doc.front_matter)}{doc.markdown}"


def build_sidecar(doc: Document) -> dict:
    """Build the sidecar JSON dict: identity, metadata, typed blocks, and quiz answers."""
    return {
        "id": doc.id,
        "path": doc.path,
        "title": doc.title,
        "publish_date": doc.publish_date.isoformat(),
        "categories": list(doc.categories),
        "tags": list(doc.front_matter.tags),
        "math": doc.math,
        "hash": doc.hash,
        "blocks": [b.model_dump(mode="json") for b in doc.body],
        "quizzes": [
            {"prompt": q.prompt, "answer": q.answer_number, "choices": len(q.choices)}
            for q in doc.quizzes
        ],
    }


def build_index(docs: Iterable[Document]) -> list[dict]:
    """Summary entries in the order given (default display order for list_all())."""
    return [
        {
            "id": d.id,
            "title": d.title,
            "publish_date": d.publish_date.isoformat(),
            "categories": list(d.categories),
        }
        for d in docs
    ]


def write_doc(doc: Document, output_dir: Path) -> tuple[Path, Path]:
    """Write normalized markdown + sidecar JSON for a single document.

    Returns (md_path, json_path).
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    md_path = output_dir / f"{doc.id}.md"
    json_path = output_dir / f"{doc.id}.json"

    md_path.write_text(emit_markdown(doc), encoding='utf-8')
    json_path.write_text(json.dumps(build_sidecar(doc), indent=2, ensure_ascii=False), encoding='utf-8')
    return md_path, json_path


def write_index(docs: Iterable[Document], output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    index_path = output_dir / "index.json"
    index_path.write_text(json.dumps(build_index(docs), indent=2, ensure_ascii=False), encoding='utf-8')
    return index_path
