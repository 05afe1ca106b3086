"""
Audit Models for Finance Tracker

Every write and every failed request is logged as a structured event.
This provides:
1. Traceability of who changed which record
2. Debugging information when things go wrong
3. A single place where internal errors are recorded before being hidden
   from the caller

DESIGN DECISION: Audit events are emitted to the structured log only.
They are never written to the relational store.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_tracker.models.common import utcnow


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Persistence
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"

    # Request failures
    VALIDATION_FAILED = "validation_failed"
    RECORD_NOT_FOUND = "record_not_found"
    INTERNAL_ERROR = "internal_error"

    # System events
    STORE_CONNECTED = "store_connected"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every write and every failed request creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity ('user', 'income', 'expense')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )
    owner_id: Optional[UUID] = Field(
        default=None,
        description="Owning user, for income and expense events"
    )

    # Correlation - one id per handled request
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one request"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "owner_id": str(self.owner_id) if self.owner_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_type": self.error_type,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_created("income", income.id, owner_id, cid)
        event = AuditEventBuilder.validation_failed("expense", "Invalid amount format", [], cid)
    """

    @staticmethod
    def record_created(
        entity_type: str,
        entity_id: UUID,
        owner_id: Optional[UUID],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} created",
        )

    @staticmethod
    def record_updated(
        entity_type: str,
        entity_id: UUID,
        owner_id: Optional[UUID],
        fields: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} updated",
            details={
                "fields": fields,
            },
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        entity_id: UUID,
        owner_id: Optional[UUID],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} deleted",
        )

    @staticmethod
    def validation_failed(
        entity_type: str,
        message: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            correlation_id=correlation_id,
            description=f"Validation failed with {len(issues)} issues",
            error_message=message,
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def record_not_found(
        entity_type: str,
        message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_NOT_FOUND,
            severity=AuditSeverity.INFO,
            entity_type=entity_type,
            correlation_id=correlation_id,
            description=message,
        )

    @staticmethod
    def internal_error(
        entity_type: Optional[str],
        error_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTERNAL_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            description=f"Internal error: {error_type}",
            error_type=error_type,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    @staticmethod
    def store_connected(url: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_CONNECTED,
            description="Relational store reachable",
            details={
                "url": url,
            },
        )
