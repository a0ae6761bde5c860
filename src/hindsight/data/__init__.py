from hindsight.data.base import MarketDataProvider
from hindsight.data.fetch import fetch_histories, fetch_histories_sync

__all__ = ["MarketDataProvider", "fetch_histories", "fetch_histories_sync"]
