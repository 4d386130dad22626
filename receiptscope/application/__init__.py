"""Workflow orchestration between the domain and the receipts service."""
