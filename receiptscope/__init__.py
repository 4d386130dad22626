"""receiptscope: spending analytics client for a receipts service."""

__version__ = "0.1.0"
