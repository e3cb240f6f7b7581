import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.constants import Role
from shared.database.postgres import Base

from .enums import role_enum


class User(Base):
    __tablename__ = "users"

    # Supabase-backed accounts reuse the provider's user id as primary key
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str | None] = mapped_column(String(150), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    email_verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    role: Mapped[Role] = mapped_column(role_enum, nullable=False, default=Role.USER)
    # Null for accounts that only authenticate through an external provider
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    enrollments = relationship(
        "Enrollment",
        back_populates="user",
        lazy="noload",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    progress_records = relationship(
        "VideoProgress",
        back_populates="user",
        lazy="noload",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
