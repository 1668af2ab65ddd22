from scheduler.models.account import Patient, Caregiver
from scheduler.models.availability import Availability
from scheduler.models.vaccine import Vaccine
from scheduler.models.reservation import Reservation
from scheduler.models.revoked_token import RevokedToken

__all__ = ["Patient", "Caregiver", "Availability", "Vaccine", "Reservation", "RevokedToken"]
