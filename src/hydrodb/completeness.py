"""
Reconciliation of requested stations against stations actually returned.
"""

import logging
from typing import Iterable, Optional

import pandas as pd

from .models import CompletenessReport, CompletenessStatus

logger = logging.getLogger(__name__)

# Above this many missing stations the identifiers are not listed.
MAX_ITEMIZED_MISSING = 10

DETAIL_HINT = "Check station number for typos or if it is a valid station in the network."
SUMMARY_HINT = (
    "More than 10 stations from the initial query were not returned. "
    "Ensure realtime and active status are correctly specified."
)


def report_completeness(
    requested: Iterable[str], obtained: Iterable[str]
) -> CompletenessReport:
    """
    Compare the requested station set with the stations present in a result.

    Never raises: missing stations are an expected outcome.
    """
    requested_set = {s for s in requested if s is not None}
    obtained_set = {s for s in obtained if s is not None}
    missing = sorted(requested_set - obtained_set)

    if not missing:
        return CompletenessReport(
            status=CompletenessStatus.COMPLETE,
            n_requested=len(requested_set),
            n_missing=0,
        )

    if len(missing) <= MAX_ITEMIZED_MISSING:
        return CompletenessReport(
            status=CompletenessStatus.PARTIAL_WITH_DETAIL,
            n_requested=len(requested_set),
            n_missing=len(missing),
            missing=missing,
            hint=DETAIL_HINT,
        )

    return CompletenessReport(
        status=CompletenessStatus.PARTIAL_SUMMARY_ONLY,
        n_requested=len(requested_set),
        n_missing=len(missing),
        hint=SUMMARY_HINT,
    )


def log_completeness(report: CompletenessReport) -> None:
    if report.is_complete:
        logger.info(str(report))
        return
    logger.warning(str(report))
    if report.hint:
        logger.warning(report.hint)


def attach_completeness(
    result: pd.DataFrame,
    requested: Iterable[str],
    obtained: Optional[Iterable[str]] = None,
) -> CompletenessReport:
    """Report, log and store the report on ``result.attrs["completeness"]``."""
    if obtained is None:
        obtained = result["STATION_NUMBER"].dropna().unique().tolist() if not result.empty else []
    report = report_completeness(requested, obtained)
    log_completeness(report)
    result.attrs["completeness"] = report
    return report
