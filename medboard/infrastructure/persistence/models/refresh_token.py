"""Refresh token ledger row. Stores the token hash only, never the raw token."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from medboard.infrastructure.persistence.database import Base
from medboard.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


class RefreshToken(CuidMixin, CreatedAtMixin, Base):
    """One issued refresh token. Deleted on logout, rotation, revocation, or cleanup."""

    __tablename__ = "refresh_token"

    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(100), nullable=True)
