# brava/flows/report_summary.py
"""Shareable health-report summary from raw sensor readings."""
from typing import List, Optional

from pydantic import BaseModel, Field

from brava.flows.base import Flow
from brava.sensors.types import SensorId, SensorReading

DEFAULT_THRESHOLD = 1.0
MAX_SUMMARY_WORDS = 200


class SummaryReading(BaseModel):
    sensor_id: SensorId
    temperature: float = Field(..., description="Temperature in Celsius.")
    timestamp: str = Field(..., description="ISO timestamp of the reading.")


class ReportSummaryInput(BaseModel):
    sensor_readings: List[SummaryReading] = Field(..., min_length=1)
    user_medical_history: Optional[str] = Field(None, description="User provided medical history")
    threshold: Optional[float] = Field(None, gt=0, description="Temperature threshold for alerts, default 1.0°C")


class ReportSummaryOutput(BaseModel):
    summary: str = Field(..., min_length=1, description="Summarized health report highlighting key trends and anomalies.")


PROMPT = """
You are an AI assistant specialized in summarizing breast health reports based on temperature sensor data.

Analyze the provided sensor readings and medical history to generate a concise summary highlighting key trends, anomalies, and potential concerns.

Sensors a-d sit on the left side and e-h on the right, in matching order (a pairs with e, b with f, and so on).
Pay close attention to temperature differences exceeding the threshold of {{ threshold }} °C, as these may indicate abnormal conditions.

Medical history is: {{ user_medical_history or "not provided" }}

Here are the sensor readings:
{% for r in sensor_readings %}
  - Sensor ID: {{ r.sensor_id }}, Temperature: {{ r.temperature }}°C, Timestamp: {{ r.timestamp }}
{% endfor %}

Provide a summary that is easily understandable and can be shared with healthcare professionals.
The summary should be no more than {{ max_words }} words.
"""


def readings_for_summary(readings: List[SensorReading]) -> List[dict]:
    return [
        {"sensor_id": r.sensor_id, "temperature": r.temperature, "timestamp": r.timestamp}
        for r in readings
    ]


def _clip_words(text: str, limit: int) -> str:
    words = text.split()
    if len(words) <= limit:
        return text.strip()
    return " ".join(words[:limit]).rstrip(",;:") + "…"


class ReportSummaryFlow(Flow[ReportSummaryInput, ReportSummaryOutput]):
    def prepare(self, data: ReportSummaryInput) -> dict:
        ctx = data.model_dump()
        if ctx["threshold"] is None:
            ctx["threshold"] = DEFAULT_THRESHOLD
        ctx["max_words"] = MAX_SUMMARY_WORDS
        return ctx

    def finalize(self, data: ReportSummaryInput, result: ReportSummaryOutput) -> ReportSummaryOutput:
        return ReportSummaryOutput(summary=_clip_words(result.summary, MAX_SUMMARY_WORDS))


report_summary_flow = ReportSummaryFlow(
    name="generateHealthReportSummaryFlow",
    input_schema=ReportSummaryInput,
    output_schema=ReportSummaryOutput,
    prompt=PROMPT,
)


def generate_health_report_summary(data) -> ReportSummaryOutput:
    return report_summary_flow(data)
