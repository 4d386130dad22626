"""Unified command-line interface for receiptscope.

Usage:
    receiptscope login <email>
    receiptscope dashboard
    receiptscope analytics --category 3
    receiptscope period 2025-01-01 2025-03-31
    receiptscope receipts --recent
    receiptscope logout
"""
