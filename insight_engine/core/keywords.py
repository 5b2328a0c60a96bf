"""Query keyword tables

Substring lists scanned in the lower-cased query text. The dispatcher only asks
questions of a ``KeywordTable``; adding a language means extending the lists.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class KeywordTable(BaseModel):
    """Keyword heuristics for period, anomaly and correlation detection"""

    # Checked in insertion order, first hit wins
    periods: Dict[str, List[str]] = Field(
        default_factory=lambda: {
            "year": ["год", "year"],
            "month": ["месяц", "month"],
            "week": ["недел", "week"],
        },
        description="Period name -> substrings"
    )
    anomaly: List[str] = Field(
        default_factory=lambda: ["аномал", "anomal"],
        description="Substrings requesting anomaly detection"
    )
    correlation: List[str] = Field(
        default_factory=lambda: ["коррел", "correlation", "зависимост"],
        description="Substrings requesting a correlation matrix"
    )

    @staticmethod
    def _contains_any(query: str, tokens: List[str]) -> bool:
        text = (query or "").lower()
        return any(token in text for token in tokens)

    def detect_period(self, query: str, default: str = "day") -> str:
        for period, tokens in self.periods.items():
            if self._contains_any(query, tokens):
                return period
        return default

    def wants_anomalies(self, query: str) -> bool:
        return self._contains_any(query, self.anomaly)

    def wants_correlations(self, query: str) -> bool:
        return self._contains_any(query, self.correlation)


DEFAULT_KEYWORDS = KeywordTable()


def get_keyword_table(overrides: Optional[Dict[str, object]] = None) -> KeywordTable:
    """Return the default table, or a copy with some lists replaced"""
    if not overrides:
        return DEFAULT_KEYWORDS
    return DEFAULT_KEYWORDS.model_copy(update=overrides, deep=True)
