"""Request audit logging."""

from .audit import AuditEvent, RequestAuditLog, sanitize_arguments, utc_timestamp

__all__ = ["AuditEvent", "RequestAuditLog", "sanitize_arguments", "utc_timestamp"]
