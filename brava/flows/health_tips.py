# brava/flows/health_tips.py
from typing import List

from pydantic import BaseModel, Field

from brava.flows.base import Flow
from brava.flows.diagnose_risk import RiskReading
from brava.sensors.types import User


class HealthTipsInput(BaseModel):
    sensor_readings: List[RiskReading] = Field(..., min_length=1)
    user: User


class HealthTipsOutput(BaseModel):
    health_tips: List[str] = Field(..., min_length=1, description="Personalized health tips.")
    educational_content: str = Field(..., min_length=1, description="Relevant breast health education content.")


PROMPT = """
You are a helpful AI assistant specialized in providing personalized health tips based on breast temperature data.

Given the following sensor readings and user profile, generate personalized health tips and relevant educational content.

Sensor Readings:
{% for r in sensor_readings %}
- Side: {{ r.side }}, Position: {{ r.position }}, Temperature: {{ r.temperature }}°C, Timestamp: {{ r.timestamp }}
{% endfor %}

User Profile:
- Name: {{ user.name }}
- Age: {{ user.age }}
- Medical History: {{ user.medical_history or "None provided" }}
- Differential Threshold: {{ user.threshold }}°C

Provide concise and actionable health tips based on the sensor data and the user's profile. Also include relevant breast health education content.
Keep tips non-diagnostic; suggest seeing a clinician for anything concerning.
"""

health_tips_flow = Flow(
    name="personalizedHealthTipsFlow",
    input_schema=HealthTipsInput,
    output_schema=HealthTipsOutput,
    prompt=PROMPT,
)


def get_personalized_health_tips(data) -> HealthTipsOutput:
    return health_tips_flow(data)


def fallback_tips() -> HealthTipsOutput:
    return HealthTipsOutput(
        health_tips=[
            "Wear the device at a similar time each day so readings stay comparable.",
            "Note any new lumps, skin changes or persistent pain and mention them to your doctor.",
            "Keep up regular clinical screenings recommended for your age.",
        ],
        educational_content=(
            "Small temperature differences between the left and right side are normal and change "
            "through the day and the menstrual cycle. A difference that stays high over several "
            "scans is worth discussing with a healthcare professional."
        ),
    )
