"""Role profiles: one doctor or hospital profile per user."""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from medboard.infrastructure.persistence.database import Base
from medboard.infrastructure.persistence.models.mixins import Model


class DoctorProfile(Model, Base):
    __tablename__ = "doctor_profile"

    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    specialty_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    subspecialty_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    profile_photo: Mapped[str | None] = mapped_column(String(500), nullable=True)


class HospitalProfile(Model, Base):
    __tablename__ = "hospital_profile"

    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    institution_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    city_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    about: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo: Mapped[str | None] = mapped_column(String(500), nullable=True)
