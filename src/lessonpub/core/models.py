"""Document model: front matter, typed body blocks, and parse intermediates"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FrontMatter(BaseModel):
    """Validated front matter. Unknown keys are kept in authored order."""
    model_config = ConfigDict(frozen=True, extra="allow")

    title: str
    date: str                       # verbatim text, e.g. '2024-11-14 17:00:00 -0800'
    publish_date: datetime = Field(exclude=True)
    categories: list[str] = []
    tags: list[str] = []
    math: bool = False


class Paragraph(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["paragraph"] = "paragraph"
    text: str


class Heading(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=6)
    text: str


class ListBlock(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["list"] = "list"
    ordered: bool = False
    items: list[str]


class CodeSample(BaseModel):
    """A fenced or indented code block; filename comes from a trailing `{: file="..." }`."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["code"] = "code"
    language: str = ""
    filename: Optional[str] = None
    text: str


class Table(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["table"] = "table"
    headers: list[str]
    rows: list[list[str]] = []


class Callout(BaseModel):
    """A prompt blockquote (tip, info, warning, danger), plain quote, or stray details region."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["callout"] = "callout"
    style: str = "quote"
    text: str


class QuizQuestion(BaseModel):
    """A multiple-choice question whose answer sits in a collapsible region."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["quiz"] = "quiz"
    prompt: str
    code_sample: Optional[CodeSample] = None
    choices: list[str] = Field(min_length=1)
    answer_index: int
    explanation: str = ""

    @model_validator(mode="after")
    def _answer_in_range(self) -> "QuizQuestion":
        if not 0 <= self.answer_index < len(self.choices):
            raise ValueError(
                f"answer_index {self.answer_index} out of range for {len(self.choices)} choices"
            )
        return self

    @property
    def answer_number(self) -> int:
        """1-based number of the correct choice as displayed."""
        return self.answer_index + 1

    @property
    def correct_choice(self) -> str:
        return self.choices[self.answer_index]


BodyBlock = Annotated[
    Union[Paragraph, Heading, ListBlock, CodeSample, Table, Callout, QuizQuestion],
    Field(discriminator="kind"),
]


class Document(BaseModel):
    """An immutable instructional document."""
    model_config = ConfigDict(frozen=True)

    id: str
    path: str
    front_matter: FrontMatter
    raw_markdown: str = Field(repr=False)   # full file content
    markdown: str                   # body without front matter, verbatim
    hash: str                       # sha256 of the full raw file
    body: list[BodyBlock] = []

    @property
    def title(self) -> str:
        return self.front_matter.title

    @property
    def publish_date(self) -> datetime:
        return self.front_matter.publish_date

    @property
    def categories(self) -> list[str]:
        return self.front_matter.categories

    @property
    def tags(self) -> set[str]:
        return set(self.front_matter.tags)

    @property
    def math(self) -> bool:
        return self.front_matter.math

    @property
    def quizzes(self) -> list[QuizQuestion]:
        return [b for b in self.body if isinstance(b, QuizQuestion)]


@dataclass
class ParsedDoc:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:         Path
    raw_markdown: str          # full file content (includes front matter)
    markdown:     str          # body only (front matter stripped)
    hash:         str
    frontmatter:  dict[str, Any]
    tokens:       list         # markdown-it Token objects
