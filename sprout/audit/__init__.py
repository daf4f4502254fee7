"""Audit logging package."""

from sprout.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
