"""Observability – structured logging and audit trail."""
