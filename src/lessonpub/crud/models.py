"""Database table definitions for committed documents"""

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class DocumentRow(SQLModel, table=True):
    """A committed lesson document; raw_markdown is the source of truth for rehydration"""
    __tablename__ = "documents"
    id: str = Field(..., primary_key=True, description="Document slug")
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    publish_date: datetime = Field(..., sa_column=Column(DateTime(timezone=True), nullable=False, index=True))
    categories: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    math: bool = Field(default=False, nullable=False)
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    raw_markdown: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    quiz_count: int = Field(default=0, nullable=False)
    front_matter_extra: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON(none_as_null=True), nullable=True))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    committed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))
