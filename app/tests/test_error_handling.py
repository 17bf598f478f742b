import json
import unittest

from core.error.handler import ErrorHandler
from core.error.types import ValidationCode
from core.utils.form_audit import FormAuditLogger


class TestErrorHandler(unittest.TestCase):
    def test_component_error_has_no_values(self):
        with self.assertLogs("core.error.handler", level="INFO") as logs:
            result = ErrorHandler.handle_component_error(
                component="password",
                field="newPassword",
                message="The password must be at least 6 characters long",
                code=ValidationCode.TOO_SHORT
            )

        error = result["error"]
        self.assertEqual(error["type"], "component")
        self.assertEqual(error["details"], {"component": "password", "field": "newPassword", "code": "too_short"})
        self.assertEqual(logs.records[0].levelname, "INFO")

    def test_remote_error(self):
        with self.assertLogs("core.error.handler", level="WARNING"):
            result = ErrorHandler.handle_remote_error(action="update_email", status_code=401, message=None)

        self.assertEqual(result["error"]["message"], "Request rejected")
        self.assertEqual(result["error"]["details"]["status_code"], 401)

    def test_system_error_records_exception(self):
        with self.assertLogs("core.error.handler", level="ERROR"):
            result = ErrorHandler.handle_system_error(
                code="REQUEST_FAILED",
                service="api_client",
                action="update_password",
                message="Request failed",
                error=ConnectionError("refused")
            )

        details = result["error"]["details"]
        self.assertEqual(details["error_type"], "ConnectionError")
        self.assertEqual(details["error_message"], "refused")


class TestFormAuditLogger(unittest.TestCase):
    def test_transition_is_json(self):
        with self.assertLogs("form_audit", level="INFO") as logs:
            FormAuditLogger.log_state_transition(
                form_id="password:1",
                from_state={"phase": "submitting"},
                to_state={"phase": "failed"},
                error="Wrong current password"
            )

        entry = json.loads(logs.records[0].getMessage())
        self.assertEqual(entry["form_id"], "password:1")
        self.assertEqual(entry["status"], "failure")
        self.assertEqual(entry["error"], "Wrong current password")

    def test_form_event(self):
        with self.assertLogs("form_audit", level="INFO") as logs:
            FormAuditLogger.log_form_event("email:1", "ignored_submit")

        entry = json.loads(logs.records[0].getMessage())
        self.assertEqual(entry["event_type"], "ignored_submit")
        self.assertNotIn("detail", entry)


if __name__ == '__main__':
    unittest.main()
