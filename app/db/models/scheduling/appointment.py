# app/db/models/scheduling/appointment.py
from typing import Optional
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: Optional[int] = Field(default=None, primary_key=True)
    tutor_name: str
    pet_name: str
    phone: str  # digits only
    description: str
    # naive local time; plain datetime fields are timezone-aware on newer SQLModel
    schedule_at: datetime = Field(sa_column=Column(DateTime(timezone=False), index=True, nullable=False))
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=False), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=False), nullable=False),
    )
