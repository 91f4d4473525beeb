"""Bucket scored patients into the three submission lists."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from risk_triage.client import ApiClient
from risk_triage.scoring import score_patient

logger = logging.getLogger(__name__)

SUBMIT_PATH = "/submit-assessment"


@dataclass
class ClassificationSet:
    """Patient identifiers per category, in collection order.

    A patient may appear in any number of the lists.
    """

    high_risk: list[str] = field(default_factory=list)
    fever: list[str] = field(default_factory=list)
    data_quality_issues: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, list[str]]:
        return {
            "high_risk_patients": list(self.high_risk),
            "fever_patients": list(self.fever),
            "data_quality_issues": list(self.data_quality_issues),
        }

    def counts(self) -> dict[str, int]:
        return {k: len(v) for k, v in self.to_payload().items()}


def analyze(patients: Iterable[Mapping[str, Any]]) -> ClassificationSet:
    """Score every patient and sort identifiers into categories."""
    result = ClassificationSet()
    for p in patients:
        pid = p.get("patient_id")
        score = score_patient(p)

        if score.is_high_risk:
            result.high_risk.append(pid)
        if score.has_fever:
            result.fever.append(pid)
        if score.is_data_quality_issue:
            result.data_quality_issues.append(pid)

    logger.debug("Classification counts: %s", result.counts())
    return result


def submit_assessment(client: ApiClient, classification: ClassificationSet) -> Any:
    """POST the classification and return the server's response.

    Raises
    ------
    requests.HTTPError
        If the submission is rejected.
    """
    payload = classification.to_payload()
    logger.info("Submitting assessment: %s", classification.counts())
    return client.post_json(SUBMIT_PATH, payload)
