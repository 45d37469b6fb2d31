import datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hobby_tracker.app.database import Base


class Session(Base):
    """One logged stretch of time spent on a hobby."""

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(primary_key=True)
    hobby_id: Mapped[int] = mapped_column(
        ForeignKey("hobbies.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    hobby: Mapped["Hobby"] = relationship(back_populates="sessions")
