# idea_validator/db/models.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from idea_validator.db.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes, including on backends (SQLite) that drop the offset."""
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class ProductIdea(Base):
    __tablename__ = "product_ideas"
    __table_args__ = (Index("ix_product_ideas_created_at", "created_at"),)

    # Insertion order; breaks ties between equal created_at values
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    target_market: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)

    validation: Mapped[IdeaValidation] = relationship(
        back_populates="product_idea", uselist=False, cascade="all, delete-orphan", lazy="joined"
    )


class IdeaValidation(Base):
    __tablename__ = "idea_validations"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    product_idea_id: Mapped[str] = mapped_column(ForeignKey("product_ideas.id"), unique=True, nullable=False)
    # Report sections, stored as their camelCase JSON form
    user_analysis: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    pain_points: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    features: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    risks: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    metrics: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    market_analysis: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    viability_score: Mapped[float] = mapped_column(Float, nullable=False)
    recommendation: Mapped[str] = mapped_column(String(32), nullable=False)
    reasoning: Mapped[str] = mapped_column(Text, nullable=False)
    next_steps: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)

    product_idea: Mapped[ProductIdea] = relationship(back_populates="validation")
