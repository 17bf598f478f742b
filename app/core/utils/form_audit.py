"""Form-specific audit logging

Handlers for the ``form_audit`` logger come from settings.LOGGING.
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

logger = logging.getLogger("form_audit")


class FormAuditLogger:
    """Handles form-specific audit logging"""

    @staticmethod
    def get_current_timestamp() -> str:
        """Get current timestamp in ISO format"""
        return datetime.now().isoformat()

    @staticmethod
    def log_state_transition(
        form_id: str,
        from_state: Dict[str, Any],
        to_state: Dict[str, Any],
        error: Optional[str] = None
    ):
        """
        Log a form phase transition

        :param form_id: Form instance identifier
        :param from_state: Previous state (audit-safe view)
        :param to_state: New state (audit-safe view)
        :param error: Error message if applicable
        """
        transition_data = {
            "timestamp": FormAuditLogger.get_current_timestamp(),
            "form_id": form_id,
            "from_state": from_state,
            "to_state": to_state,
            "status": "failure" if error else "success"
        }

        if error:
            transition_data["error"] = error

        logger.info(json.dumps(transition_data))

    @staticmethod
    def log_form_event(
        form_id: str,
        event_type: str,
        detail: Optional[str] = None
    ):
        """
        Log a form event that does not change the phase

        :param form_id: Form instance identifier
        :param event_type: Type of event (ignored_submit, unauthenticated, torn_down)
        :param detail: Extra detail if applicable
        """
        event_data = {
            "timestamp": FormAuditLogger.get_current_timestamp(),
            "form_id": form_id,
            "event_type": event_type
        }

        if detail:
            event_data["detail"] = detail

        logger.info(json.dumps(event_data))
