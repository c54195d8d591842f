"""
Vehicle model.

A vehicle is identified by its plate number. It is created the
first time a violation is issued against that plate and is never
deleted by the ledger.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fine_ledger.models.base import Base
from fine_ledger.models.enums import VehicleCategory


class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(primary_key=True)
    plate_number: Mapped[str] = mapped_column(
        String(8), unique=True, nullable=False, index=True
    )
    # Fixed at first sight: a later violation quoting a different
    # category for the same plate does not change it.
    category: Mapped[VehicleCategory] = mapped_column(
        SAEnum(
            VehicleCategory,
            name="vehicle_category_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    violations: Mapped[list["Violation"]] = relationship(
        back_populates="vehicle"
    )

    def __repr__(self) -> str:
        return f"<Vehicle {self.plate_number} ({self.category.value})>"
