# brava/reports/export.py
import csv
import io
from typing import List

from brava.sensors.types import ScanResult

CSV_FILENAME = "smart-bra-data.csv"
CSV_HEADER = ["ScanID", "Timestamp", "Risk", "Ultrasound(mm)", "Temperature(C)", "Bioimpedance(ohm)"]


def scans_to_csv(scans: List[ScanResult]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for s in scans:
        writer.writerow([s.id, s.timestamp, s.risk, s.readings.ultrasound,
                         s.readings.temperature, s.readings.bioimpedance])
    return buf.getvalue()
