"""Clinical risk triage for paginated patient listings."""

from risk_triage.analysis import ClassificationSet, analyze, submit_assessment
from risk_triage.client import ApiClient
from risk_triage.collector import PatientCollector, RetryExhausted, RetryPolicy, fetch_all_patients
from risk_triage.config import Settings, load_settings
from risk_triage.scoring import HIGH_RISK_THRESHOLD, ScoreResult, score_patient

__all__ = [
    "HIGH_RISK_THRESHOLD",
    "ApiClient",
    "ClassificationSet",
    "PatientCollector",
    "RetryExhausted",
    "RetryPolicy",
    "ScoreResult",
    "Settings",
    "analyze",
    "fetch_all_patients",
    "load_settings",
    "score_patient",
    "submit_assessment",
]
