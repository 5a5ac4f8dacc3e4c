"""File discovery, front matter extraction and validation, and markdown-it tokenization"""

import re
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt
from pydantic import ValidationError

from lessonpub.core.models import FrontMatter, ParsedDoc
from lessonpub.core.utils.hashing import sha256
from lessonpub.errors import MalformedFrontMatter


FRONTMATTER_RE = re.compile(r'^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)', re.DOTALL)
MD_EXTENSIONS = {'.md', '.markdown'}
DATE_FORMATS = ('%Y-%m-%d %H:%M:%S %z', '%Y-%m-%d %H:%M %z')
REQUIRED_FIELDS = ('title', 'date')


class _FrontMatterLoader(yaml.SafeLoader):
    """Safe loader that leaves timestamps as plain strings so dates round-trip verbatim."""


_FrontMatterLoader.yaml_implicit_resolvers = {
    first: [r for r in resolvers if r[0] != 'tag:yaml.org,2002:timestamp']
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.load(m.group(1), Loader=_FrontMatterLoader) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def parse_date(value: str) -> datetime:
    """Parse a front matter date; the result must carry a UTC offset."""
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"date '{value}' has no UTC offset")
    return parsed


def _as_list(value: Any) -> list[str]:
    """Accept a YAML list or a single scalar; drop duplicates keeping first occurrence."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(dict.fromkeys(str(v) for v in value))
    return [str(value)]


def build_front_matter(raw: dict[str, Any], path: str) -> FrontMatter:
    """Validate a raw front matter mapping into a FrontMatter model."""
    bad_keys = [k for k in raw if not isinstance(k, str)]
    if bad_keys:
        raise MalformedFrontMatter(path, f"non-string key(s): {', '.join(map(repr, bad_keys))}")

    missing = [f for f in REQUIRED_FIELDS if raw.get(f) in (None, '')]
    if missing:
        raise MalformedFrontMatter(path, f"missing required field(s): {', '.join(missing)}")

    date_text = str(raw['date'])
    try:
        published = parse_date(date_text)
    except ValueError as e:
        raise MalformedFrontMatter(path, f"unparseable date '{date_text}'") from e

    data = dict(raw)
    data.update(
        title=str(raw['title']),
        date=date_text,
        publish_date=published,
        categories=_as_list(raw.get('categories')),
        tags=_as_list(raw.get('tags')),
    )
    try:
        return FrontMatter(**data)
    except ValidationError as e:
        raise MalformedFrontMatter(path, str(e)) from e


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.markdown files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS)


def parse_text(raw: str, path: Path, parser_config: str = 'gfm-like') -> ParsedDoc:
    """Split raw file content into front matter and tokenized body."""
    if not FRONTMATTER_RE.match(raw):
        raise MalformedFrontMatter(str(path), "no front matter block")
    try:
        frontmatter, body = _strip_frontmatter(raw)
    except ValueError as e:
        raise MalformedFrontMatter(str(path), str(e)) from e
    tokens = _make_parser(parser_config).parse(body)
    return ParsedDoc(
        path=path,
        raw_markdown=raw,
        markdown=body,
        hash=sha256(raw),
        frontmatter=frontmatter,
        tokens=tokens,
    )


def parse_file(path: Path, parser_config: str = 'gfm-like') -> ParsedDoc:
    """Parse a single markdown file into a ParsedDoc with token stream."""
    try:
        raw = path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise MalformedFrontMatter(str(path), f"not valid UTF-8: {e.reason} at byte {e.start}") from e
    except OSError as e:
        raise MalformedFrontMatter(str(path), f"unreadable: {e.strerror or e}") from e
    return parse_text(raw, path, parser_config)
