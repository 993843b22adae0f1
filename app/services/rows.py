"""Row normalization, validation and percentage calculation.

Every function here is pure: it takes one decoded row and either returns the
next stage's value or raises one of the upload errors carrying the row's
1-based position in the batch.
"""

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

from app.core.exceptions import InvalidRowError, MissingFieldError
from app.models.student import STUDENT_ID_MAX_LENGTH, STUDENT_NAME_MAX_LENGTH

logger = logging.getLogger(__name__)


# Accepted header spellings per canonical field, in priority order.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "student_id": ("Student_ID", "student_id", "StudentID", "ID"),
    "student_name": ("Student_Name", "student_name", "StudentName", "Name"),
    "total_marks": ("Total_Marks", "total_marks", "TotalMarks", "MaxMarks"),
    "marks_obtained": ("Marks_Obtained", "marks_obtained", "MarksObtained", "ObtainedMarks"),
}

# (minimum percentage, grade), highest first
GRADE_BANDS: tuple[tuple[float, str], ...] = (
    (90.0, "A+"),
    (80.0, "A"),
    (70.0, "B"),
    (60.0, "C"),
)


@dataclass(frozen=True)
class ValidatedRow:
    """A row that passed every validation rule."""

    student_id: str
    student_name: str
    total: float
    obtained: float


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def resolve_alias(row: Mapping[str, Any], aliases: tuple[str, ...]) -> Any:
    """Return the value of the first alias present in the row, or None."""
    return next((row[key] for key in aliases if key in row and _is_present(row[key])), None)


def normalize_row(row: Mapping[str, Any], position: int) -> dict[str, Any]:
    """Map a raw row onto the four canonical fields."""
    normalized: dict[str, Any] = {}
    for field, aliases in COLUMN_ALIASES.items():
        value = resolve_alias(row, aliases)
        if value is None:
            logger.debug(f"[NORMALIZE ROW {position}] no value for {field}, tried {aliases}")
            raise MissingFieldError(row=position, field=field)
        normalized[field] = value
    return normalized


def _to_text(value: Any) -> str:
    # Spreadsheet cells holding IDs often come back as 501.0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def validate_row(
    row: Mapping[str, Any],
    position: int,
    enforce_obtained_le_total: bool = True,
) -> ValidatedRow:
    """Check a normalized row against the marks rules."""
    for field in COLUMN_ALIASES:
        if not _is_present(row.get(field)):
            raise MissingFieldError(row=position, field=field)

    student_id = _to_text(row["student_id"])
    student_name = _to_text(row["student_name"])
    if not student_id:
        raise MissingFieldError(row=position, field="student_id")
    if not student_name:
        raise MissingFieldError(row=position, field="student_name")
    if len(student_id) > STUDENT_ID_MAX_LENGTH:
        raise InvalidRowError(position, "student_id too long", value=student_id[:20] + "...")
    if len(student_name) > STUDENT_NAME_MAX_LENGTH:
        raise InvalidRowError(position, "student_name too long", value=student_name[:20] + "...")

    total = _to_number(row["total_marks"])
    obtained = _to_number(row["marks_obtained"])
    if total is None or obtained is None:
        raw = row["total_marks"] if total is None else row["marks_obtained"]
        raise InvalidRowError(position, "non-numeric marks", value=raw)

    if total <= 0:
        raise InvalidRowError(position, "non-positive total", value=row["total_marks"])

    if obtained < 0:
        raise InvalidRowError(position, "negative obtained", value=row["marks_obtained"])

    if enforce_obtained_le_total and obtained > total:
        raise InvalidRowError(position, "obtained exceeds total", value=row["marks_obtained"])

    return ValidatedRow(
        student_id=student_id,
        student_name=student_name,
        total=total,
        obtained=obtained,
    )


def compute_percentage(total: float, obtained: float) -> float:
    """obtained / total * 100, rounded half-up to two decimals."""
    ratio = Decimal(str(obtained)) / Decimal(str(total)) * 100
    return float(ratio.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def grade_for(percentage: float) -> str:
    for threshold, grade in GRADE_BANDS:
        if percentage >= threshold:
            return grade
    return "F"
