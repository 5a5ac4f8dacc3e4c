"""Top-level token groups to typed body blocks, using source line positions"""

import re

from lessonpub.core.models import Callout, CodeSample, Heading, ListBlock, Paragraph, Table
from lessonpub.core.utils.tokens import heading_level, inline_text, top_level


ATTR_LIST_RE = re.compile(r'^\{:\s*(.*?)\s*\}$')
TRAILING_ATTR_RE = re.compile(r'\n?\{:\s*(.*?)\s*\}\s*$')
ATTR_KV_RE = re.compile(r'([\w-]+)="([^"]*)"')
ATTR_CLASS_RE = re.compile(r'(?:^|\s)\.([\w-]+)')
PROMPT_PREFIX = 'prompt-'
SUMMARY_RE = re.compile(r'<summary>.*?</summary>', re.DOTALL | re.IGNORECASE)
DETAILS_TAG_RE = re.compile(r'</?details[^>]*>', re.IGNORECASE)


class Details:
    """A `<details>` disclosure region spanning one or more top-level groups."""

    def __init__(self, text: str):
        self.text = text

    @property
    def explanation(self) -> str:
        inner = DETAILS_TAG_RE.sub('', SUMMARY_RE.sub('', self.text, count=1))
        return inner.strip()


def parse_attr_list(text: str) -> dict[str, str] | None:
    """Parse a `{: key="v" .class }` attribute list; classes map to the value 'class'."""
    m = ATTR_LIST_RE.match(text.strip())
    if not m:
        return None
    attrs = dict(ATTR_KV_RE.findall(m.group(1)))
    for cls in ATTR_CLASS_RE.findall(ATTR_KV_RE.sub('', m.group(1))):
        attrs[cls] = 'class'
    return attrs


def _source_slice(token, source_lines: list[str]) -> str:
    """Extract raw source for a block via token.map; fallback to token.content."""
    if token.map:
        start, end = token.map
        return ''.join(source_lines[start:end]).rstrip()
    return token.content.rstrip()


def _is_html(group: list, marker: str) -> bool:
    return group[0].type == 'html_block' and marker in group[0].content.lower()


def _item_text(tokens: list) -> str:
    """Text of one list item: its paragraphs and code, joined by newlines."""
    parts = []
    for tok in tokens:
        if tok.type == 'inline':
            parts.append(tok.content)
        elif tok.type in ('fence', 'code_block'):
            parts.append(tok.content.rstrip('\n'))
    return '\n'.join(parts)


def list_items(group: list) -> list[str]:
    """Split a list group into the text of each top-level item."""
    items, current, depth = [], None, 0
    for tok in group[1:-1]:
        if tok.type == 'list_item_open' and depth == 0:
            current = []
        elif tok.type == 'list_item_close' and depth == 1:
            items.append(_item_text(current))
            current = None
        elif current is not None:
            current.append(tok)
        depth += tok.nesting
    return items


def _table(group: list) -> Table:
    headers: list[str] = []
    rows: list[list[str]] = []
    in_head = False
    for tok in group:
        if tok.type == 'thead_open':
            in_head = True
        elif tok.type == 'thead_close':
            in_head = False
        elif tok.type == 'tr_open' and not in_head:
            rows.append([])
        elif tok.type == 'inline':
            (headers if in_head else rows[-1]).append(tok.content)
    return Table(headers=headers, rows=rows)


def _prompt_style(attrs: dict[str, str]) -> str | None:
    """The `prompt-<style>` class of an attribute list, if any."""
    for k, v in attrs.items():
        if v == 'class' and k.startswith(PROMPT_PREFIX):
            return k[len(PROMPT_PREFIX):]
    return None


def _callout(group: list) -> Callout:
    text = inline_text(group)
    style = 'quote'
    m = TRAILING_ATTR_RE.search(text)
    if m:
        prompt = _prompt_style(parse_attr_list(m.group(0).strip()) or {})
        if prompt:
            style = prompt
            text = text[:m.start()]
    return Callout(style=style, text=text.strip())


def _code(tok) -> CodeSample:
    language = tok.info.split()[0] if tok.info.strip() else ''
    return CodeSample(language=language, text=tok.content.rstrip('\n'))


def group_to_blocks(groups: list[list], source_lines: list[str]) -> list:
    """Convert top-level token groups to blocks; `<details>` regions come back as Details."""
    blocks: list = []
    i = 0
    while i < len(groups):
        group = groups[i]
        tok = group[0]

        if _is_html(group, '<details'):
            j = i
            while j < len(groups) - 1 and not _is_html(groups[j], '</details>'):
                j += 1
            start = groups[i][0].map[0]
            end = groups[j][-1].map[1] if groups[j][-1].map else groups[j][0].map[1]
            blocks.append(Details(''.join(source_lines[start:end]).rstrip()))
            i = j + 1
            continue

        if tok.type == 'paragraph_open':
            text = inline_text(group)
            attrs = parse_attr_list(text)
            if attrs is not None:
                # attribute list: decorate the preceding block, never emitted itself
                prev = blocks[-1] if blocks else None
                if isinstance(prev, CodeSample) and 'file' in attrs:
                    blocks[-1] = prev.model_copy(update={'filename': attrs['file']})
                elif isinstance(prev, Callout) and prev.style == 'quote' and (style := _prompt_style(attrs)):
                    blocks[-1] = prev.model_copy(update={'style': style})
            else:
                blocks.append(Paragraph(text=text))
        elif tok.type == 'heading_open':
            blocks.append(Heading(level=heading_level(tok), text=inline_text(group)))
        elif tok.type in ('bullet_list_open', 'ordered_list_open'):
            blocks.append(ListBlock(ordered=tok.type == 'ordered_list_open', items=list_items(group)))
        elif tok.type in ('fence', 'code_block'):
            blocks.append(_code(tok))
        elif tok.type == 'table_open':
            blocks.append(_table(group))
        elif tok.type == 'blockquote_open':
            blocks.append(_callout(group))
        elif tok.type == 'html_block':
            blocks.append(Paragraph(text=_source_slice(tok, source_lines)))
        i += 1

    return blocks


def tokens_to_blocks(tokens: list, source_lines: list[str]) -> list:
    """Convert a document's token stream to blocks and Details regions."""
    return group_to_blocks(top_level(tokens), source_lines)
