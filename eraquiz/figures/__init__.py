from .estimator import RelevanceWindow, estimate_relevance_window, year_from_date

__all__ = ["RelevanceWindow", "estimate_relevance_window", "year_from_date"]
