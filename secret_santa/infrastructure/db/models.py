# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from secret_santa.infrastructure.db.session import Base

USER_ID_LENGTH = 450


class GroupRow(Base):
    __tablename__ = "groups"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200))
    organizer_user_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), index=True)
    # NULL until the draw runs, then set once
    draw_completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    participants: Mapped[list["GroupParticipantRow"]] = relationship(
        "GroupParticipantRow", back_populates="group", cascade="all,delete", passive_deletes=True
    )
    exclusion_rules: Mapped[list["ExclusionRuleRow"]] = relationship(
        "ExclusionRuleRow", back_populates="group", cascade="all,delete", passive_deletes=True
    )


class GroupParticipantRow(Base):
    __tablename__ = "group_participants"
    group_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), primary_key=True, index=True)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    group: Mapped["GroupRow"] = relationship("GroupRow", back_populates="participants")


class ExclusionRuleRow(Base):
    __tablename__ = "exclusion_rules"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id_1", "user_id_2", name="u_group_exclusion_pair"),
        Index("ix_exclusion_rules_group_user_2", "group_id", "user_id_2"),
    )
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    group_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"), index=True
    )
    user_id_1: Mapped[str] = mapped_column(String(USER_ID_LENGTH))
    user_id_2: Mapped[str] = mapped_column(String(USER_ID_LENGTH))
    created_by_user_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    group: Mapped["GroupRow"] = relationship("GroupRow", back_populates="exclusion_rules")
