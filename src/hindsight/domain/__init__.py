from hindsight.domain.models import (
    MissingDataPolicy,
    OptimizationResult,
    PriceMatrix,
    PricePoint,
    Side,
    TradeAction,
)

__all__ = [
    "MissingDataPolicy",
    "OptimizationResult",
    "PriceMatrix",
    "PricePoint",
    "Side",
    "TradeAction",
]
