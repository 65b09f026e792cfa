"""
Yaps metrics record and the lookback windows it is charted over
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from yaps_dashboard.errors import InvalidPayloadError


# (chart label, record field), in x-axis order
LOOKBACK_WINDOWS = (
    ("24h", "yaps_l24h"),
    ("48h", "yaps_l48h"),
    ("7d", "yaps_l7d"),
    ("30d", "yaps_l30d"),
    ("3m", "yaps_l3m"),
    ("6m", "yaps_l6m"),
    ("12m", "yaps_l12m"),
    ("All Time", "yaps_all"),
)

STAT_CARDS = (
    ("24h Yaps", "yaps_l24h"),
    ("7d Yaps", "yaps_l7d"),
    ("30d Yaps", "yaps_l30d"),
    ("All Time Yaps", "yaps_all"),
)

# One colour per input position
SERIES_COLORS = ("#7CFFD3", "#FFD37C", "#FF7C7C")


def format_yaps(value: float) -> str:
    return f"{value:.2f}"


@dataclass
class YapsData:
    """Attention scores for one account, one field per lookback window."""

    username: str
    user_id: str
    yaps_l24h: float = 0.0
    yaps_l48h: float = 0.0
    yaps_l7d: float = 0.0
    yaps_l30d: float = 0.0
    yaps_l3m: float = 0.0
    yaps_l6m: float = 0.0
    yaps_l12m: float = 0.0
    yaps_all: float = 0.0

    @classmethod
    def from_json(cls, payload: Any) -> "YapsData":
        """
        Build a record from the upstream JSON body

        Args:
            payload: Decoded JSON returned by the API

        Returns:
            YapsData instance

        Raises:
            InvalidPayloadError: if the body is not a record with ``yaps_all``
                or a window holds a non-numeric value
        """
        if not isinstance(payload, Mapping) or payload.get("yaps_all") is None:
            raise InvalidPayloadError()

        windows = {}
        for _, field in LOOKBACK_WINDOWS:
            windows[field] = _as_score(payload.get(field))

        return cls(
            username=str(payload.get("username") or ""),
            user_id=str(payload.get("user_id") or ""),
            **windows,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def window_values(self):
        """(label, value) pairs in chart order."""
        return [(label, getattr(self, field)) for label, field in LOOKBACK_WINDOWS]


def chart_rows(records: Sequence[Optional[YapsData]]) -> List[Dict[str, Any]]:
    """One row per lookback window with a ``yapsN`` key per input position.

    Empty slots chart as None; no loaded record at all gives no rows.
    """
    if not any(records):
        return []
    rows = []
    for label, field in LOOKBACK_WINDOWS:
        row = {"name": label}
        for i, record in enumerate(records):
            row[f"yaps{i + 1}"] = getattr(record, field) if record else None
        rows.append(row)
    return rows


def _as_score(value: Any) -> float:
    if value is None:
        return 0.0
    # bool is an int subclass but never a valid score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidPayloadError()
    return float(value)
