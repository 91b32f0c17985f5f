"""Stock ledger: multi-tenant inventory tracking with moving-average costing."""

__version__ = "1.0.0"
