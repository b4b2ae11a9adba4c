"""
Person - someone the user works with.

Goal.stakeholders and ChecklistItem.assigned_by / assigned_to hold Person ids.
"""
from datetime import datetime
from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, new_id, utcnow


class Person(Base):
    __tablename__ = "people_profiles"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    work_function: Mapped[str | None] = mapped_column(String(256), nullable=True)
    characteristics: Mapped[str | None] = mapped_column(Text, nullable=True)
    biases: Mapped[str | None] = mapped_column(Text, nullable=True)
    communication_style: Mapped[str | None] = mapped_column(Text, nullable=True)
    relationship_type: Mapped[str | None] = mapped_column(
        String(64), nullable=True, comment="e.g. manager, peer, report, client"
    )
    profile_picture: Mapped[str | None] = mapped_column(Text, nullable=True, comment="URL")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
