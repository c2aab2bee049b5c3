"""batchtrace - inventory costing, batch ledger and traceability engine."""

__version__ = "1.0.0"
