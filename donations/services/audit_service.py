import logging

from donations.models import AuditLog, SYSTEM_ACTOR

logger = logging.getLogger(__name__)


class AuditService:
    """Writes entries to the audit trail."""

    def record(self, actor, action: str, details: str = "") -> AuditLog:
        """
        Append an audit entry.

        Args:
            actor: The acting User, or None for automated actions
            action: Action code, e.g. SCHEDULE_CREATED
            details: Human readable description

        Returns:
            AuditLog: The created entry
        """
        entry = AuditLog.objects.create(
            user=actor,
            actor=str(actor.pk) if actor is not None else SYSTEM_ACTOR,
            action=action,
            details=details,
        )
        logger.info(f"Audit {action} by {entry.actor}: {details}")
        return entry
