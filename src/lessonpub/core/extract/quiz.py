"""Quiz recognition: an ordered list followed by a `<details>` answer region"""

import re

from lessonpub.core.extract.blocks import Details
from lessonpub.core.models import Callout, CodeSample, Heading, ListBlock, Paragraph, QuizQuestion
from lessonpub.errors import InvalidQuizReference


# a letter must be a capital standing alone, so "Answer: A subclass..." names no choice
ANSWER_RE = re.compile(r'(?i:answer)\b[^\w\n]*(?i:is\s+)?(?i:(?:option|choice)\s*)?(\d+\b|[A-Z]\b(?!\s+[a-z]))')
LEADING_CHOICE_RE = re.compile(r'^\W*(\d+)[.):]')


def answer_index(explanation: str) -> int | None:
    """Return the 0-based choice named by an 'Answer: N' (1-based) or 'Answer: B' line.

    Without an 'Answer' phrase, an explanation opening with '3.' names choice 3.
    """
    m = ANSWER_RE.search(explanation) or LEADING_CHOICE_RE.match(explanation)
    if not m:
        return None
    ref = m.group(1)
    if ref.isdigit():
        return int(ref) - 1
    return ord(ref.upper()) - ord('A')


def _take_prompt(blocks: list) -> tuple[str, CodeSample | None]:
    """Pop the prompt paragraph (and code sample shown with it) off the tail of blocks.

    Falls back to the nearest heading's text, which is left in place.
    """
    code = blocks.pop() if blocks and isinstance(blocks[-1], CodeSample) else None
    if blocks and isinstance(blocks[-1], Paragraph):
        return blocks.pop().text, code
    if blocks and isinstance(blocks[-1], Heading):
        return blocks[-1].text, code
    return '', code


def assemble_quizzes(blocks: list, path: str) -> list:
    """Fold ordered list + Details pairs into QuizQuestions; stray Details become callouts."""
    out: list = []
    for block in blocks:
        if not isinstance(block, Details):
            out.append(block)
            continue

        explanation = block.explanation
        if not (out and isinstance(out[-1], ListBlock) and out[-1].ordered):
            out.append(Callout(style='details', text=explanation))
            continue

        choices = out.pop().items
        prompt, code = _take_prompt(out)
        index = answer_index(explanation)
        if index is None or not 0 <= index < len(choices):
            raise InvalidQuizReference(path, prompt, index, len(choices))
        out.append(QuizQuestion(
            prompt=prompt,
            code_sample=code,
            choices=choices,
            answer_index=index,
            explanation=explanation,
        ))
    return out
