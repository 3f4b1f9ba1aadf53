"""
Modelos SQLAlchemy — exportar todos para que create_all los registre.
"""

from agenda.models.appointment import Appointment, AppointmentStatus
from agenda.models.doctor_schedule import DoctorSchedule
from agenda.models.doctor_unavailability import DoctorUnavailability, UnavailabilityType

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "DoctorSchedule",
    "DoctorUnavailability",
    "UnavailabilityType",
]
