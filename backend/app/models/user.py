"""User ORM — one registered person and the pointer to their profile image.

Invariants:
    - id is a serial integer primary key, assigned by the database
    - name, age, image_path are non-nullable
    - image_path is a public asset reference (e.g. /uploads/image-...png), not a foreign key
    - created_at is set once at insert time and never updated; the column
      carries a database default so rows inserted outside the ORM get one too

Design Decisions:
    - created_at indexed: it is the listing sort key
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    """A registered user with exactly one profile image asset."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    image_path: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, name={self.name!r}, image_path={self.image_path!r})"
