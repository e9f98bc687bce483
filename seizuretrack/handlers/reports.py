"""
Report module command handlers
Aggregated seizure statistics and the shareable text report
"""

from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Query, Request
from fastapi.responses import PlainTextResponse

from seizuretrack.core.analytics import ReportRange, parse_date
from seizuretrack.core.logger import get_logger
from seizuretrack.core.paths import get_reports_dir
from seizuretrack.core.reports import build_exporter

from . import api_handler, error_response, get_runtime, success_response

logger = get_logger(__name__)


def default_range(runtime) -> str:
    return runtime.config.get("reports.default_range", ReportRange.LAST_30_DAYS.value)


@api_handler(
    method="GET",
    path="/reports/summary",
    tags=["reports"],
    summary="Get report summary",
    description="Totals, averages, frequency buckets, type distribution and top triggers for a report range",
)
async def get_report_summary(
    request: Request,
    report_range: Optional[str] = Query(None, alias="range"),
    day: Optional[str] = Query(None, alias="date"),
) -> Dict[str, Any]:
    """Get report summary

    @param range - 7d | 30d | 90d | 6m | 1y, defaults to reports.default_range
    @param date - Last day of the report, defaults to today
    """
    runtime = get_runtime(request)
    try:
        today = parse_date(day) if day else date.today()
        exporter = build_exporter(
            runtime.store,
            report_range or default_range(runtime),
            today,
            runtime.week_starts_on,
        )
    except ValueError as e:
        return error_response(f"Invalid report parameters: {e}")

    return success_response(runtime, exporter.to_dict())


@api_handler(
    method="GET",
    path="/reports/export",
    tags=["reports"],
    summary="Export the text report",
)
async def export_report(
    request: Request,
    report_range: Optional[str] = Query(None, alias="range"),
    day: Optional[str] = Query(None, alias="date"),
):
    """Download the plain-text report as seizure-report-YYYY-MM-DD.txt"""
    runtime = get_runtime(request)
    try:
        today = parse_date(day) if day else date.today()
        exporter = build_exporter(
            runtime.store,
            report_range or default_range(runtime),
            today,
            runtime.week_starts_on,
        )
    except ValueError as e:
        return error_response(f"Invalid report parameters: {e}")

    logger.info(f"Report exported: {exporter.filename}")
    return PlainTextResponse(
        exporter.render_text(),
        headers={"Content-Disposition": f'attachment; filename="{exporter.filename}"'},
    )


@api_handler(
    method="POST",
    path="/reports/save",
    tags=["reports"],
    summary="Save the text report to the reports directory",
)
async def save_report(
    request: Request,
    report_range: Optional[str] = Query(None, alias="range"),
) -> Dict[str, Any]:
    runtime = get_runtime(request)
    try:
        exporter = build_exporter(
            runtime.store,
            report_range or default_range(runtime),
            date.today(),
            runtime.week_starts_on,
        )
    except ValueError as e:
        return error_response(f"Invalid report parameters: {e}")

    try:
        output_dir = runtime.config.get("reports.output_dir") or get_reports_dir()
        path = exporter.write(Path(output_dir))
        return success_response(runtime, {"path": str(path)}, "Report saved")
    except OSError as e:
        logger.error(f"Failed to save report: {e}", exc_info=True)
        return error_response(f"Failed to save report: {str(e)}")
