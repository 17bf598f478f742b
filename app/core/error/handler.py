"""Structured error records for the account client

Every failure that reaches a form or API boundary is logged here once, as a
dict with a fixed shape:

- component: input rejected before any request (logged at INFO)
- remote: the backend declined a request (WARNING)
- system: transport failures and unexpected exceptions (ERROR)

Credential values are never part of a record.
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Builds and logs error records"""

    @classmethod
    def _create_error_response(
        cls,
        error_type: str,
        message: str,
        details: Dict,
        context: Optional[Dict] = None,
        level: int = logging.ERROR
    ) -> Dict:
        """Log one error record and return it

        Args:
            error_type: component, remote or system
            message: Human-readable summary
            details: Fields identifying where the error happened
            context: Debugging context such as a traceback
            level: Log level for the record

        Returns:
            Dict: ``{"error": record}``
        """
        record = {
            "type": error_type,
            "message": message,
            "details": details,
            "context": context or {},
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

        logger.log(
            level,
            f"Error handled: {error_type}: {message}",
            extra={
                "error": record,
                "details": details,
                "context": context
            }
        )

        return {"error": record}

    @classmethod
    def handle_component_error(
        cls,
        component: str,
        field: str,
        message: str,
        code: Any = None
    ) -> Dict:
        """Record a local validation failure

        Only the field name is kept, never its value.
        """
        details = {
            "component": component,
            "field": field,
            "code": str(code.value if hasattr(code, "value") else code)
        }
        return cls._create_error_response(
            error_type="component",
            message=message,
            details=details,
            level=logging.INFO
        )

    @classmethod
    def handle_remote_error(
        cls,
        action: str,
        status_code: int,
        message: Optional[str]
    ) -> Dict:
        """Record a backend rejection"""
        return cls._create_error_response(
            error_type="remote",
            message=message or "Request rejected",
            details={
                "action": action,
                "status_code": status_code
            },
            level=logging.WARNING
        )

    @classmethod
    def handle_system_error(
        cls,
        code: str,
        service: str,
        action: str,
        message: str,
        error: Optional[Exception] = None
    ) -> Dict:
        """Record a transport failure or unexpected exception

        Args:
            code: Short error code, e.g. REQUEST_FAILED
            service: Where it happened (api_client, a form type)
            action: Operation in progress
            message: Human-readable summary
            error: The exception, if there is one

        Returns:
            Dict: ``{"error": record}``
        """
        details = {
            "code": code,
            "service": service,
            "action": action
        }

        context = {}
        if error:
            details["error_type"] = type(error).__name__
            details["error_message"] = str(error)
            context = {
                "exception": repr(error),
                "traceback": traceback.format_exc()
            }

        return cls._create_error_response(
            error_type="system",
            message=message,
            details=details,
            context=context
        )
