"""Pure risk scoring for a single patient record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from risk_triage.coercion import Parsed, split_blood_pressure, to_float, to_int

HIGH_RISK_THRESHOLD = 4
FEVER_THRESHOLD = 99.6


@dataclass(frozen=True)
class ScoreResult:
    """Per-dimension stages and flags for one patient.

    Parameters
    ----------
    bp_stage : int
        Blood pressure stage, 0 when unparseable, otherwise 1-4.
    temp_stage : int
        Temperature stage, 0-2.
    age_stage : int
        Age stage, 0 when unparseable, otherwise 1-2.
    is_data_quality_issue : bool
        At least one dimension failed to parse.
    has_fever : bool
        Temperature parsed and is at or above ``FEVER_THRESHOLD``.
    """

    bp_stage: int
    temp_stage: int
    age_stage: int
    is_data_quality_issue: bool
    has_fever: bool

    @property
    def total_score(self) -> int:
        return self.bp_stage + self.temp_stage + self.age_stage

    @property
    def is_high_risk(self) -> bool:
        return self.total_score >= HIGH_RISK_THRESHOLD


def _systolic_stage(systolic: int) -> int:
    if systolic < 120:
        return 1
    if systolic <= 129:
        return 2
    if systolic <= 139:
        return 3
    return 4


def _diastolic_stage(diastolic: int) -> int:
    # Two-tier rubric: there is no stage 2 for diastolic readings.
    if diastolic < 80:
        return 1
    if diastolic <= 89:
        return 3
    return 4


def score_bp(raw: Any) -> tuple[int, bool]:
    """Return ``(stage, valid)`` for a blood pressure string."""
    reading = split_blood_pressure(raw)
    if not isinstance(reading, Parsed):
        return 0, False
    systolic, diastolic = reading.value
    return max(_systolic_stage(systolic), _diastolic_stage(diastolic)), True


def score_temp(raw: Any) -> tuple[int, float | None, bool]:
    """Return ``(stage, value, valid)`` for a temperature in Fahrenheit."""
    temp = to_float(raw)
    if not isinstance(temp, Parsed):
        return 0, None, False
    if temp.value <= 99.5:
        return 0, temp.value, True
    if temp.value <= 100.9:
        return 1, temp.value, True
    return 2, temp.value, True


def score_age(raw: Any) -> tuple[int, bool]:
    """Return ``(stage, valid)`` for an age in years."""
    age = to_int(raw)
    if not isinstance(age, Parsed):
        return 0, False
    if age.value > 65:
        return 2, True
    return 1, True


def score_patient(record: Mapping[str, Any]) -> ScoreResult:
    """Score one raw patient record.

    Malformed or missing fields never raise; each one contributes zero
    points and sets ``is_data_quality_issue``.

    Parameters
    ----------
    record : Mapping[str, Any]
        Raw record with ``blood_pressure``, ``temperature`` and ``age`` keys.

    Returns
    -------
    ScoreResult
    """
    bp_stage, bp_valid = score_bp(record.get("blood_pressure"))
    temp_stage, temp_value, temp_valid = score_temp(record.get("temperature"))
    age_stage, age_valid = score_age(record.get("age"))

    return ScoreResult(
        bp_stage=bp_stage,
        temp_stage=temp_stage,
        age_stage=age_stage,
        is_data_quality_issue=not (bp_valid and temp_valid and age_valid),
        has_fever=temp_value is not None and temp_value >= FEVER_THRESHOLD,
    )
