from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class IssueKind(str, Enum):
    PARSE = "ParseWarning"
    CONFLICT = "ConflictWarning"
    UNMAPPED_COLUMN = "UnmappedColumnWarning"
    UNEXPECTED_VISIT = "UnexpectedVisitWarning"


def _empty_values() -> tuple[str, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class DataQualityIssue:
    """A non-fatal finding collected during a run and returned to the caller."""

    kind: IssueKind
    column: str
    message: str
    patient_id: str | None = None
    row: object | None = None
    values: tuple[str, ...] = field(default_factory=_empty_values)

    def __str__(self) -> str:
        location = self.column
        if self.patient_id is not None:
            location += f" [patient {self.patient_id}]"
        if self.row is not None:
            location += f" [row {self.row}]"
        return f"{self.kind.value}: {location}: {self.message}"


def parse_warning(column: str, row: object, raw_value: str, target: str) -> DataQualityIssue:
    return DataQualityIssue(
        kind=IssueKind.PARSE,
        column=column,
        row=row,
        values=(raw_value,),
        message=f"could not parse {raw_value!r} as {target}; analysis value set to missing",
    )


def conflict_warning(
    column: str, patient_id: str, values: tuple[str, ...], chosen: str
) -> DataQualityIssue:
    return DataQualityIssue(
        kind=IssueKind.CONFLICT,
        column=column,
        patient_id=patient_id,
        values=values,
        message=(
            f"time-invariant value differs across visits ({', '.join(values)}); "
            f"filled empty visits with first value {chosen!r}"
        ),
    )


def unmapped_column_warning(column: str) -> DataQualityIssue:
    return DataQualityIssue(
        kind=IssueKind.UNMAPPED_COLUMN,
        column=column,
        message="column is not in the data dictionary and was dropped",
    )


def unexpected_visit_warning(
    column: str, patient_id: str, row: object, visit: str, expected: tuple[int, int]
) -> DataQualityIssue:
    low, high = expected
    return DataQualityIssue(
        kind=IssueKind.UNEXPECTED_VISIT,
        column=column,
        patient_id=patient_id,
        row=row,
        values=(visit,),
        message=f"visit number {visit!r} is outside the expected range {low}-{high}",
    )
