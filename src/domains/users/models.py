"""User models for the TrainerDesk platform."""
from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config.database import Base
from src.core.models import TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """A trainer account. Every student-owned row is scoped to one user."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    profile: Mapped["TrainerProfile | None"] = relationship(
        "TrainerProfile",
        back_populates="user",
        uselist=False,
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"


# Import for type hints
from src.domains.trainers.models import TrainerProfile  # noqa: E402, F401
