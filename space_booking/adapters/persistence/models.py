"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Destination(Base):
    __tablename__ = "destinations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    gender: Mapped[str | None] = mapped_column(String(10))
    birthday: Mapped[date | None] = mapped_column(Date)
    launchpad_id: Mapped[str] = mapped_column(String(50), nullable=False)
    destination_id: Mapped[int] = mapped_column(ForeignKey("destinations.id"))
    launch_date: Mapped[date] = mapped_column(Date, nullable=False)


# Seeded in id order; the order defines the weekday rotation (Monday first)
DEFAULT_DESTINATIONS: tuple[str, ...] = (
    "Mars",
    "Moon",
    "Pluto",
    "Asteroid Belt",
    "Europa",
    "Titan",
    "Ganymede",
)
