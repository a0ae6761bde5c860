from hindsight.config import Settings
from hindsight.domain.models import (
    MissingDataPolicy,
    OptimizationResult,
    PriceMatrix,
    PricePoint,
    Side,
    TradeAction,
)
from hindsight.errors import InsufficientDataError, MisalignedDataError, MissingDataError
from hindsight.planner import plan_trades
from hindsight.series import build_price_matrix

__version__ = "0.1.0"

__all__ = [
    "InsufficientDataError",
    "MisalignedDataError",
    "MissingDataError",
    "MissingDataPolicy",
    "OptimizationResult",
    "PriceMatrix",
    "PricePoint",
    "Settings",
    "Side",
    "TradeAction",
    "build_price_matrix",
    "plan_trades",
]
