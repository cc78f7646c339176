# brava/flows/diagnose_risk.py
"""
Breast-cancer risk assessment from paired thermal readings.

- diagnose_breast_cancer_risk: run the flow (raises FlowError)
- DiagnoseRiskInput / DiagnoseRiskOutput: the flow's schemas
- DiagnoseRiskResult: the output plus the family notices it triggered
- fallback_assessment: deterministic answer when the model is unavailable
"""
from datetime import datetime
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

from brava.flows.base import Flow
from brava.flows.notify import notify_family_contacts
from brava.sensors.metrics import calculate_metrics
from brava.sensors.types import Position, Side, SensorReading, ThermalMetrics, User

RiskLevel = Literal["Low", "Moderate", "High"]


class RiskReading(BaseModel):
    side: Side
    position: Position
    temperature: float = Field(..., description="Temperature in Celsius.")
    timestamp: datetime


class DiagnoseRiskInput(BaseModel):
    sensor_readings: List[RiskReading] = Field(..., min_length=1, description="Readings from the smart bra.")
    user: User


class DiagnoseRiskOutput(BaseModel):
    risk_level: RiskLevel = Field(..., description="The assessed risk level for breast cancer.")
    summary: str = Field(..., min_length=1, description="Concise summary of the key findings from the thermal data.")
    recommendation: str = Field(..., min_length=1, description="A clear, actionable next step for the user.")


class DiagnoseRiskResult(DiagnoseRiskOutput):
    """The model's answer plus the family notices sent because of it."""
    notices: List[Dict[str, Any]] = Field(default_factory=list)


PROMPT = """
You are an expert AI medical assistant specializing in early breast cancer detection using thermal data. Your task is to analyze thermal data from a smart bra, assess the risk, and provide a clear summary and recommendation.

You will evaluate three key parameters derived from the sensor data:
1. **Average Thermal Differential**: the average temperature difference between corresponding sensors on the left and right breasts. A persistently high average difference is a warning sign.
2. **Peak Thermal Asymmetry**: the single largest temperature difference between any pair of corresponding sensors. A high peak value is a significant indicator of a potential anomaly.
3. **Thermal Volatility**: the standard deviation of the temperature differentials across all sensor pairs. High volatility can indicate an unstable thermal pattern.

**User Information:**
- Age: {{ user.age }}
- Medical History: {{ user.medical_history or "None provided" }}
- Alert Threshold (for differential): {{ user.threshold }}°C

**Sensor Data:**
{% for r in sensor_readings %}
- Side: {{ r.side }}, Position: {{ r.position }}, Temp: {{ r.temperature }}°C
{% endfor %}

**Calculated Parameters (verify against the readings):**
- Average Thermal Differential: {{ "%.2f"|format(metrics.avg_differential) }}°C
- Peak Thermal Asymmetry: {{ "%.2f"|format(metrics.peak_asymmetry) }}°C
- Thermal Volatility: {{ "%.2f"|format(metrics.volatility) }}

**Analysis Instructions:**
1. Check the three parameters against the provided sensor data.
2. Correlate these findings with the user's age and medical history.
3. Assess the risk level as 'Low', 'Moderate', or 'High'.
   - High: Peak Asymmetry significantly above the user's threshold (> {{ user.threshold }}°C), especially when combined with a high Average Differential or high Volatility.
   - Moderate: values consistently near the threshold, or one parameter notably high while the others are normal.
   - Low: all parameters well within normal ranges.
4. summary: explain WHAT was found. Mention the key parameters and why they led to your assessment.
5. recommendation: a clear, actionable next step. For 'High', strongly recommend consulting a doctor immediately. For 'Moderate', suggest continued monitoring and scheduling a check-up. For 'Low', recommend continuing routine monitoring.

If the risk is 'High', the system automatically alerts the user's designated family members. Your response should reflect this.
"""


def _metrics_for(data: DiagnoseRiskInput) -> ThermalMetrics:
    readings = [
        SensorReading(side=r.side, position=r.position, temperature=r.temperature, timestamp=r.timestamp.isoformat())
        for r in data.sensor_readings
    ]
    return calculate_metrics(readings, data.user.threshold)


class DiagnoseRiskFlow(Flow[DiagnoseRiskInput, DiagnoseRiskOutput]):
    def prepare(self, data: DiagnoseRiskInput) -> dict:
        ctx = data.model_dump()
        ctx["metrics"] = _metrics_for(data)
        return ctx

    def finalize(self, data: DiagnoseRiskInput, result: DiagnoseRiskOutput) -> DiagnoseRiskResult:
        notices = notify_family_contacts(data.user, result.risk_level, result.summary)
        return DiagnoseRiskResult(**result.model_dump(), notices=notices)


diagnose_risk_flow = DiagnoseRiskFlow(
    name="diagnoseBreastCancerRiskFlow",
    input_schema=DiagnoseRiskInput,
    output_schema=DiagnoseRiskOutput,
    prompt=PROMPT,
)


def diagnose_breast_cancer_risk(data) -> DiagnoseRiskResult:
    return diagnose_risk_flow(data)


def fallback_assessment(metrics: ThermalMetrics, threshold: float) -> DiagnoseRiskOutput:
    """Rule-based assessment used when the model cannot be reached."""
    peak = metrics.peak_asymmetry
    avg = metrics.avg_differential
    vol = metrics.volatility

    if peak >= threshold * 1.5 or (peak >= threshold and (avg >= threshold * 0.5 or vol >= threshold * 0.3)):
        level = "High"
        recommendation = "Please consult a doctor as soon as possible to review these readings."
    elif peak >= threshold * 0.7:
        level = "Moderate"
        recommendation = "Keep monitoring daily and schedule a routine check-up with your doctor."
    else:
        level = "Low"
        recommendation = "Continue your routine monitoring."

    summary = (
        f"Peak asymmetry {peak:.2f}°C against a {threshold:.1f}°C threshold, "
        f"average differential {avg:.2f}°C, volatility {vol:.2f}. "
        "AI narration is temporarily unavailable; this assessment is rule-based."
    )
    return DiagnoseRiskOutput(risk_level=level, summary=summary, recommendation=recommendation)
