# Models package (re-export feature modules for stable imports)
from .scheduling.appointment import Appointment

__all__ = [
    "Appointment",
]
