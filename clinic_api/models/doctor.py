from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)

    # Personal information
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)

    # Professional information
    specialty = Column(String(100), nullable=True)

    # Contact information
    phone = Column(String(20), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    appointments = relationship("Appointment", back_populates="doctor")
    available_times = relationship(
        "DoctorAvailability",
        back_populates="doctor",
        cascade="all, delete-orphan",
        order_by="DoctorAvailability.time_slot",
    )

    @property
    def availability(self):
        return [slot.time_slot for slot in self.available_times]

    def __repr__(self):
        return f"<Doctor(id={self.id}, name='{self.name}', specialty='{self.specialty}')>"

class DoctorAvailability(Base):
    """One bookable slot of a doctor, stored as "HH:MM-HH:MM"."""
    __tablename__ = "doctor_available_times"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    time_slot = Column(String(11), nullable=False)

    doctor = relationship("Doctor", back_populates="available_times")

    def __repr__(self):
        return f"<DoctorAvailability(doctor_id={self.doctor_id}, time_slot='{self.time_slot}')>"
