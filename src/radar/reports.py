"""AI report composition and single-token report lookup."""

from radar.exceptions import UpstreamError
from radar.logging import get_logger
from radar.models import Report
from radar.upstream.client import DataClient

logger = get_logger(__name__)

SECTION_SEPARATOR = "\n\n"
NO_REPORT_MESSAGE = "No AI report available for this token"
PROCESSING_MESSAGE = "AI analysis is being processed..."


def combine_sections(report: Report | None) -> str | None:
    """Join the non-empty report sections with a blank line, None if there are none."""
    if report is None:
        return None
    parts = [section for section in report.sections if section]
    return SECTION_SEPARATOR.join(parts) if parts else None


async def fetch_report(client: DataClient, token_id: int | str) -> str:
    """Fetch and combine the AI report for a single token.

    Raises:
        UpstreamError: If the upstream call fails.
    """
    response = await client.fetch_ai_reports([token_id], limit=1)
    if not response.success:
        raise UpstreamError(
            response.error or "Failed to fetch AI report",
            status_code=response.status_code,
        )

    if not response.data:
        return NO_REPORT_MESSAGE

    text = combine_sections(Report.from_api({"TOKEN_ID": token_id, **response.data[0]}))
    if text is None:
        return PROCESSING_MESSAGE

    logger.info("ai_report_fetched", token_id=token_id, length=len(text))
    return text
