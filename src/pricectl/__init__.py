"""pricectl — ledger price listings from historical exchange rates."""

__version__ = "0.1.0"
