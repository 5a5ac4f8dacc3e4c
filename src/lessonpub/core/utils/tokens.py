"""Shared markdown-it token utilities"""


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def close_index(tokens: list, i: int) -> int:
    """Return the index of the token closing the container opened at tokens[i].

    Non-container tokens (fence, html_block, hr, ...) close themselves.
    """
    if tokens[i].nesting != 1:
        return i
    depth = 0
    for j in range(i, len(tokens)):
        depth += tokens[j].nesting
        if depth == 0:
            return j
    return len(tokens) - 1


def top_level(tokens: list) -> list[list]:
    """Split a flat token stream into one token group per top-level block."""
    groups: list[list] = []
    i = 0
    while i < len(tokens):
        j = close_index(tokens, i)
        groups.append(tokens[i:j + 1])
        i = j + 1
    return groups


def inline_text(tokens: list) -> str:
    """Join the raw source of every inline token in tokens with newlines."""
    return "\n".join(t.content for t in tokens if t.type == 'inline')
