# brava/sensors/types.py
"""
Record types shared by the dashboard, the store and the AI flows.

The same pydantic models are used as flow input schemas, so field names here
are what the prompt templates see.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, TypeAdapter, ValidationError, field_validator

Side = Literal["left", "right"]
Position = Literal["A", "B", "C", "D"]
SensorId = Literal["a", "b", "c", "d", "e", "f", "g", "h"]
ReadingStatus = Literal["normal", "warning", "alert"]
ScanRisk = Literal["Low", "High"]

POSITIONS = ("A", "B", "C", "D")

_DATETIME = TypeAdapter(datetime)


class FamilyContact(BaseModel):
    id: str
    name: str
    relationship: str
    phone: str
    email: str


class User(BaseModel):
    id: str
    name: str
    email: EmailStr
    age: int = Field(..., gt=0, lt=130)
    weight: Optional[float] = Field(None, gt=0, description="Body weight in kg")
    medical_history: str = ""
    threshold: float = Field(1.0, description="Temperature alert threshold in Celsius")
    paired_device_id: Optional[str] = None
    avatar_url: str = ""
    family_contacts: List[FamilyContact] = Field(default_factory=list)


class SensorReading(BaseModel):
    """One thermal sensor on one side of the garment."""
    side: Side
    position: Position
    temperature: float = Field(..., description="Temperature in Celsius")
    timestamp: str
    status: ReadingStatus = "normal"

    @field_validator("timestamp")
    @classmethod
    def _iso_timestamp(cls, v: str) -> str:
        # kept as the original string; the flows parse it as a datetime
        try:
            _DATETIME.validate_python(v)
        except ValidationError:
            raise ValueError("timestamp must be an ISO-8601 date-time")
        return v

    @property
    def sensor_id(self) -> str:
        # left A..D -> a..d, right A..D -> e..h
        offset = 0 if self.side == "left" else len(POSITIONS)
        return "abcdefgh"[offset + POSITIONS.index(self.position)]


class ScanReadings(BaseModel):
    temperature: float
    bioimpedance: float
    ultrasound: float


class ScanResult(BaseModel):
    id: str
    timestamp: str
    readings: ScanReadings
    risk: ScanRisk


class HistoricalData(BaseModel):
    date: str
    avg_differential: float
    peak_asymmetry: float
    volatility: float
    alerts: int = 0


class Differential(BaseModel):
    position: Position
    left_temp: float
    right_temp: float
    diff: float
    status: ReadingStatus = "normal"


class ThermalMetrics(BaseModel):
    differentials: List[Differential] = Field(default_factory=list)
    avg_differential: float = 0.0
    peak_asymmetry: float = 0.0
    volatility: float = 0.0
