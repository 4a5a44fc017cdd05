"""Parse free-text installment specifications ("3x", "30/60/90", "30,60,90")"""

import logging
import re
from typing import Union

from settlement_gateway.domain.models import (
    ByCount,
    ByOffsets,
    ParseError,
    ParseErrorReason,
    ScheduleIntent,
)

logger = logging.getLogger(__name__)

MAX_INSTALLMENTS = 12

COUNT_PATTERN = re.compile(r"^([0-9]+)x$", re.IGNORECASE)
OFFSETS_PATTERN = re.compile(r"^([0-9]+)[/,]([0-9]+)([/,]([0-9]+))*$")
OFFSETS_SEPARATOR = re.compile(r"[/,]")

GROUPED_GUIDANCE = 'Grouped orders only accept the "Nx" format, e.g. "2x" for 2 weekly installments'
UNGROUPED_GUIDANCE = 'Use "3x" for 3 installments, or "30/60/90" (also "30,60,90") for due days after the order date'


def parse_installment_spec(text: str, is_grouped: bool) -> Union[ScheduleIntent, ParseError]:
    """
    Turn user-entered schedule text into a ScheduleIntent.

    Precedence:
    1. "Nx" (case-insensitive) -> ByCount, N in 1..12
    2. Grouped orders accept nothing else
    3. "d1/d2/..." or "d1,d2,..." (at least two offsets) -> ByOffsets, 1..12 offsets

    Failures are returned, not raised: user input fails routinely and the
    caller renders a message per reason.
    """
    trimmed = (text or "").strip()

    count_match = COUNT_PATTERN.match(trimmed)
    if count_match:
        count = int(count_match.group(1))
        if 1 <= count <= MAX_INSTALLMENTS:
            return ByCount(count=count)
        return ParseError(
            reason=ParseErrorReason.COUNT_OUT_OF_RANGE,
            message=f"Installment count must be between 1 and {MAX_INSTALLMENTS}, got {count}",
        )

    if is_grouped:
        logger.debug("Rejected grouped installment spec %r", trimmed)
        return ParseError(reason=ParseErrorReason.INVALID_FORMAT_FOR_GROUPED, message=GROUPED_GUIDANCE)

    if OFFSETS_PATTERN.match(trimmed):
        offsets = tuple(int(part) for part in OFFSETS_SEPARATOR.split(trimmed))
        if 1 <= len(offsets) <= MAX_INSTALLMENTS:
            return ByOffsets(offsets=offsets)
        return ParseError(
            reason=ParseErrorReason.OFFSETS_COUNT_OUT_OF_RANGE,
            message=f"At most {MAX_INSTALLMENTS} due days are allowed, got {len(offsets)}",
        )

    logger.debug("Rejected installment spec %r", trimmed)
    return ParseError(reason=ParseErrorReason.INVALID_FORMAT_FOR_UNGROUPED, message=UNGROUPED_GUIDANCE)
