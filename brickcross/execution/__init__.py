"""Execution package — order intents, fills and the paper broker."""

from .broker import Broker, PaperBroker
from .models import Fill, OrderIntent, OrderSide, Trade

__all__ = ["Broker", "PaperBroker", "Fill", "OrderIntent", "OrderSide", "Trade"]
