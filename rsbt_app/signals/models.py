"""Data models for per-day strategy signals"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional


@dataclass(frozen=True)
class DailySignal:
    """Signal state for one asset on one aligned date"""
    date: date
    price: float
    ma_short: Optional[float]
    ma_long: Optional[float]
    rs: float  # asset close / baseline close
    rs_ma_short: Optional[float]
    rs_ma_long: Optional[float]
    trend_bull: bool
    mom_bull: bool
    rs_bull: bool
    score: int  # 0-3
    raw_weight: float  # -1.0, 0.0, 0.5 or 1.0
    stop_level: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        """Flat representation using the exported column names"""
        return {
            "date": self.date.isoformat(),
            "close": self.price,
            "ma_short": self.ma_short,
            "ma_long": self.ma_long,
            "rs": self.rs,
            "rs_ma_short": self.rs_ma_short,
            "rs_ma_long": self.rs_ma_long,
            "trend_bull": self.trend_bull,
            "mom_bull": self.mom_bull,
            "rs_bull": self.rs_bull,
            "score": self.score,
            "raw_weight": self.raw_weight,
            "stop_level": self.stop_level,
        }


@dataclass(frozen=True)
class BaselineState:
    """Baseline market regime for one aligned date"""
    date: date
    close: float
    ma_short: Optional[float]
    ma_long: Optional[float]
    bear: bool
    daily_return: float
