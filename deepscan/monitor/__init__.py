"""deepscan.monitor – external detector ensemble."""
from .ensemble import DetectorEnsemble, collect_scores, parse_provider_score

__all__ = ["DetectorEnsemble", "collect_scores", "parse_provider_score"]
