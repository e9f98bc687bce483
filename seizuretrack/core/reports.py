"""
Report exporter
Turns a report summary and the underlying records into a JSON payload or a
plain-text document suitable for sharing with a healthcare provider
"""

from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from seizuretrack.core.analytics import (
    WEEKDAYS,
    ReportRange,
    ReportSummary,
    build_report,
    filter_by_range,
    parse_date,
)
from seizuretrack.core.logger import get_logger
from seizuretrack.core.store import RecordStore
from seizuretrack.models.entities import Medication, SeizureLog
from seizuretrack.models.reference import seizure_type_label

logger = get_logger(__name__)

REPORT_TITLE = "SeizureTrack Health Report"
RECENT_SEIZURE_LIMIT = 10
DISCLAIMER = (
    "This report is for informational purposes. "
    "Please consult your healthcare provider for medical advice."
)


def _long_date(day: date) -> str:
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def _short_date(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}, {day.year}"


class ReportExporter:
    """Report exporter"""

    def __init__(
        self,
        summary: ReportSummary,
        seizures: Sequence[SeizureLog],
        medications: Sequence[Medication],
        generated_on: date,
    ):
        self.summary = summary
        self.seizures = filter_by_range(seizures, summary.start, summary.end)
        self.medications = list(medications)
        self.generated_on = generated_on

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready payload: summary shapes plus the records they cover"""
        summary = self.summary
        return {
            "generatedOn": self.generated_on.isoformat(),
            "range": summary.range.value,
            "start": summary.start.isoformat(),
            "end": summary.end.isoformat(),
            "total": summary.total,
            "averageDuration": summary.average_duration,
            "averageSeverity": summary.average_severity,
            "activeMedications": summary.active_medications,
            "frequency": [
                {"label": p.label, "count": p.count, "start": p.start.isoformat() if p.start else None}
                for p in summary.frequency
            ],
            "typeDistribution": [asdict(item) for item in summary.type_distribution],
            "topTriggers": [asdict(item) for item in summary.top_triggers],
            "medications": [m.model_dump(mode="json") for m in self.medications],
            "seizures": [s.model_dump(mode="json") for s in self.seizures],
        }

    def render_text(self) -> str:
        summary = self.summary
        lines: List[str] = [
            REPORT_TITLE,
            f"Generated on {_long_date(self.generated_on)}",
            f"Report Period: Last {summary.range.description}",
            "",
            "Summary",
            f"  Total Seizures: {summary.total}",
            f"  Average Duration: {summary.average_duration} seconds",
            f"  Average Severity: {summary.average_severity:.1f}/5",
            f"  Active Medications: {summary.active_medications}",
            "",
            "Current Medications",
        ]

        if self.medications:
            for index, med in enumerate(self.medications, start=1):
                lines.append(f"  {index}. {med.name} - {med.dosage} ({med.frequency})")
        else:
            lines.append("  No medications recorded")

        lines += ["", "Recent Seizures"]
        if self.seizures:
            for seizure in self.seizures[:RECENT_SEIZURE_LIMIT]:
                lines.append(
                    f"  {_short_date(parse_date(seizure.date))} at {seizure.time} - "
                    f"{seizure_type_label(seizure.type)} "
                    f"({seizure.duration}s, severity {seizure.severity}/5)"
                )
        else:
            lines.append("  No seizures recorded for this period")

        if summary.top_triggers:
            lines += ["", "Common Triggers"]
            for item in summary.top_triggers:
                lines.append(f"  • {item.label}: {item.count} occurrence(s)")

        lines += ["", DISCLAIMER, ""]
        return "\n".join(lines)

    @property
    def filename(self) -> str:
        return f"seizure-report-{self.generated_on.isoformat()}.txt"

    def write(self, output_dir: Path) -> Path:
        """Write the text report into output_dir, returns the file path"""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / self.filename
        path.write_text(self.render_text(), encoding="utf-8")
        logger.info(f"✓ Report written: {path}")
        return path


def build_exporter(
    store: RecordStore,
    report_range: Union[ReportRange, str],
    today: date,
    week_starts_on: int = WEEKDAYS["sunday"],
) -> ReportExporter:
    """Summarize the store for the range ending today"""
    snapshot = store.snapshot()
    summary = build_report(
        snapshot.seizures, snapshot.medications, report_range, today, week_starts_on
    )
    return ReportExporter(summary, snapshot.seizures, snapshot.medications, today)
