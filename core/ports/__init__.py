"""Port interfaces for adapters."""

from core.ports.portfolio_api import PortfolioApi

__all__ = ["PortfolioApi"]
