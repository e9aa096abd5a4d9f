"""deepscan.forensic – heuristic analyzers and risk explainability."""
from .explainability import build_recommendation, classify_risk, risk_order
from .filename_analysis import analyze_filename, looks_generated
from .metadata_analysis import analyze_metadata

__all__ = [
    "analyze_filename",
    "analyze_metadata",
    "build_recommendation",
    "classify_risk",
    "looks_generated",
    "risk_order",
]
