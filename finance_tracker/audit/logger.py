"""
Audit Logger

DESIGN DECISION: Every write and every failed request is logged.
This provides:
1. Complete traceability of changes to user records
2. Debugging capability
3. A record of internal errors whose details are hidden from callers

The audit logger:
- Writes structured JSON lines through structlog
- Never raises: a logging failure must not fail the request
- Supports correlation IDs to trace all events of one request
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog for JSON output.

    Called once at startup with the configured log level.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log only.
    """

    def __init__(self, logger_name: str = "finance_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event at the level matching its severity.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            return False
        return True

    def log_record_created(
        self,
        entity_type: str,
        entity_id: UUID,
        owner_id: Optional[UUID],
        correlation_id: UUID,
    ) -> None:
        """Log a successful insert."""
        self.log(AuditEventBuilder.record_created(
            entity_type=entity_type,
            entity_id=entity_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    def log_record_updated(
        self,
        entity_type: str,
        entity_id: UUID,
        owner_id: Optional[UUID],
        fields: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log a successful update and which fields it touched."""
        self.log(AuditEventBuilder.record_updated(
            entity_type=entity_type,
            entity_id=entity_id,
            owner_id=owner_id,
            fields=fields,
            correlation_id=correlation_id,
        ))

    def log_record_deleted(
        self,
        entity_type: str,
        entity_id: UUID,
        owner_id: Optional[UUID],
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.record_deleted(
            entity_type=entity_type,
            entity_id=entity_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        entity_type: str,
        message: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(
            entity_type=entity_type,
            message=message,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_not_found(
        self,
        entity_type: str,
        message: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.record_not_found(
            entity_type=entity_type,
            message=message,
            correlation_id=correlation_id,
        ))

    def log_internal_error(
        self,
        entity_type: Optional[str],
        error: BaseException,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an unexpected failure with its full detail."""
        self.log(AuditEventBuilder.internal_error(
            entity_type=entity_type,
            error_type=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        ))

    def log_store_connected(self, url: str) -> None:
        self.log(AuditEventBuilder.store_connected(url))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of each handled request.
    """
    return uuid4()
