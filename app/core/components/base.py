"""Base form controller

This module defines the FormController that the credential-change forms
extend. A form owns one FormState and drives it through the phases in
core.state.form_state:

    open()   Idle -> Editing
    submit() Editing -> Submitting -> Succeeded -> Idle
                                   -> Failed -> Editing
    cancel() Editing -> Idle

Subclasses provide the field names, the local validation gate, the remote
call and what to do with a successful response. Remote calls run off the
event loop with asyncio.to_thread so only the submitting form waits.

At most one request is in flight per form: submit() is a no-op while the
form is Submitting, and cancel() is refused until the request completes.
After teardown() a late response still updates the credential store but
the form's own state is left alone. The same holds when the task running
submit() is cancelled: the form goes back to Editing with its input and the
request's result is applied to the store when it arrives.
"""

import asyncio
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.error.exceptions import (ComponentException, LocalValidationError,
                                   NotAuthenticatedException, RemoteRejection,
                                   TransportFailure)
from core.error.handler import ErrorHandler
from core.error.types import (FALLBACK_MESSAGES, SUCCESS_MESSAGES, ErrorKind,
                              FormError, ValidationResult)
from core.messaging.interface import NotificationSink
from core.messaging.service import LoggingNotificationSink
from core.state.credential_store import CredentialStore
from core.state.form_state import (Editing, Failed, FormState, Idle, Phase,
                                   Submitting, Succeeded, can_transition)
from core.utils.form_audit import FormAuditLogger

logger = logging.getLogger(__name__)

Listener = Callable[[FormState, FormState], None]


class FormController:
    """Base credential-change form"""

    form_type = "form"
    field_names: Tuple[str, ...] = ()

    def __init__(
        self,
        store: CredentialStore,
        service: Any,
        notifications: Optional[NotificationSink] = None,
        form_id: Optional[str] = None
    ):
        if store is None:
            raise ComponentException(
                message="Credential store is required",
                component=self.form_type,
                field="store",
                value="None"
            )

        self.store = store
        self.service = service
        self.notifications = notifications or LoggingNotificationSink()
        self.form_id = form_id or f"{self.form_type}:{uuid.uuid4().hex[:8]}"
        self.mounted = True
        self._listeners: List[Listener] = []
        self._state = FormState(phase=Idle(), fields=self.initial_fields())

    # State access

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def fallback_message(self) -> str:
        return FALLBACK_MESSAGES[self.form_type]

    @property
    def success_message(self) -> str:
        return SUCCESS_MESSAGES[self.form_type]

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with (previous, current) on every change

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Subclass hooks

    def initial_fields(self) -> Dict[str, str]:
        """Field values shown when the editor opens"""
        return {name: "" for name in self.field_names}

    def validate(self, fields: Dict[str, str]) -> ValidationResult:
        """Local validation gate"""
        raise NotImplementedError

    def dispatch(self, fields: Dict[str, str]) -> Any:
        """Blocking remote call, run off the event loop"""
        raise NotImplementedError

    def apply_success(self, outcome: Any) -> Optional[FormError]:
        """Apply a successful response to the credential store

        Runs even after teardown. Returns a FormError when the response
        cannot be accepted.
        """
        return None

    # User actions

    def open(self) -> FormState:
        """Open the editor"""
        if isinstance(self.phase, Idle):
            self._transition(Editing(), fields=self.initial_fields(), error=None)
        return self._state

    def cancel(self) -> bool:
        """Close the editor and reset its fields

        Returns:
            bool: False if the form is submitting and stays open
        """
        if isinstance(self.phase, Submitting):
            logger.info(f"Cancel refused for {self.form_id}: request in flight")
            return False

        if isinstance(self.phase, Editing):
            self._transition(Idle(), fields=self.initial_fields(), error=None)
        return True

    def toggle(self) -> FormState:
        """Open when closed, close when open"""
        if isinstance(self.phase, Idle):
            return self.open()
        self.cancel()
        return self._state

    def set_field(self, name: str, value: str) -> FormState:
        """Update one field of the open editor

        Raises:
            ComponentException: If the field is unknown or the editor is closed
        """
        if name not in self.field_names:
            raise ComponentException(
                message=f"Unknown field: {name}",
                component=self.form_type,
                field=name
            )

        if not isinstance(self.phase, Editing):
            raise ComponentException(
                message=f"Fields can only be edited while editing, form is {self.phase.name}",
                component=self.form_type,
                field=name
            )

        previous = self._state
        self._state = previous.evolve(fields={**previous.fields, name: value})
        self._notify_listeners(previous)
        return self._state

    def teardown(self) -> None:
        """Unmount the form; late results no longer touch its state"""
        self.mounted = False
        self._listeners.clear()
        logger.debug(f"Form {self.form_id} torn down")

    async def submit(self) -> FormState:
        """Validate and send the form

        Whatever interrupts an attempt, the form ends in Editing (input
        kept) or Idle, never in between.

        Returns:
            FormState: State after the attempt
        """
        if not self.mounted:
            FormAuditLogger.log_form_event(self.form_id, "torn_down")
            return self._state

        if isinstance(self.phase, Submitting):
            logger.debug(f"Submit ignored for {self.form_id}: request in flight")
            FormAuditLogger.log_form_event(self.form_id, "ignored_submit")
            return self._state

        if not isinstance(self.phase, Editing):
            logger.warning(f"Submit on closed form {self.form_id} ignored")
            return self._state

        if not self.store.is_authenticated():
            logger.warning(f"Submit on {self.form_id} without a session credential ignored")
            FormAuditLogger.log_form_event(self.form_id, "unauthenticated")
            return self._state

        try:
            await self._attempt()
        finally:
            if self.mounted:
                self._settle()
        return self._state

    async def _attempt(self) -> None:
        # Clear the previous error before a new attempt
        self._transition(Editing(), error=None)

        fields = dict(self._state.fields)
        try:
            self.validate(fields).raise_if_invalid()
        except LocalValidationError as e:
            ErrorHandler.handle_component_error(
                component=self.form_type,
                field=e.details["field"],
                message=e.message,
                code=e.code
            )
            self._fail(FormError.from_local(e))
            return

        self._transition(Submitting())

        request = asyncio.ensure_future(asyncio.to_thread(self.dispatch, fields))
        try:
            outcome = await asyncio.shield(request)
        except asyncio.CancelledError:
            # The request still runs to completion; its result reaches the store
            request.add_done_callback(self._apply_late_result)
            raise
        except NotAuthenticatedException:
            logger.warning(f"Credential disappeared before {self.form_id} was sent")
            if self.mounted:
                self._transition(Editing())
            return
        except RemoteRejection as e:
            self._fail(FormError(
                kind=ErrorKind.REMOTE_REJECTION,
                message=e.message or self.fallback_message,
                status_code=e.status_code
            ))
            return
        except TransportFailure:
            self._fail(FormError(
                kind=ErrorKind.TRANSPORT_FAILURE,
                message=self.fallback_message
            ))
            return
        except Exception as e:
            ErrorHandler.handle_system_error(
                code="SUBMIT_ERROR",
                service=self.form_type,
                action="submit",
                message=str(e),
                error=e
            )
            self._fail(FormError(
                kind=ErrorKind.TRANSPORT_FAILURE,
                message=self.fallback_message
            ))
            raise

        error = self.apply_success(outcome)
        if error:
            self._fail(error)
            return

        self._succeed()

    # Transitions

    def _apply_late_result(self, request: asyncio.Future) -> None:
        """Apply the result of a request whose submit was cancelled

        Only the credential store is updated; the form was already settled.
        """
        if request.cancelled():
            return

        exc = request.exception()
        if exc is not None:
            logger.warning(f"Request for cancelled submit of {self.form_id} failed: {exc!r}")
            return

        error = self.apply_success(request.result())
        FormAuditLogger.log_form_event(self.form_id, "late_result", error.message if error else None)

    def _settle(self) -> None:
        """Leave a phase an interrupted attempt stopped in"""
        if isinstance(self.phase, (Submitting, Failed)):
            logger.warning(f"Attempt on {self.form_id} interrupted in {self.phase.name}")
            self._transition(Editing())
        elif isinstance(self.phase, Succeeded):
            logger.warning(f"Attempt on {self.form_id} interrupted in {self.phase.name}")
            self._transition(Idle(), fields=self.initial_fields(), error=None)

    def _succeed(self) -> None:
        if not self.mounted:
            FormAuditLogger.log_form_event(self.form_id, "torn_down", "success not shown")
            return

        self._transition(Succeeded())
        self._transition(Idle(), fields=self.initial_fields(), error=None)
        self.notifications.success(self.success_message)

    def _fail(self, error: FormError) -> None:
        """Failed -> Editing with the error attached and fields kept"""
        if not self.mounted:
            FormAuditLogger.log_form_event(self.form_id, "torn_down", error.message)
            return

        self._transition(Failed(error), error=error)
        self._transition(Editing(), error=error)

    def _transition(self, phase: Phase, **changes) -> None:
        previous = self._state
        if not can_transition(previous.phase, phase):
            raise ComponentException(
                message=f"Invalid transition {previous.phase.name} -> {phase.name}",
                component=self.form_type,
                field="phase",
                value=phase.name
            )

        self._state = previous.evolve(phase=phase, **changes)

        FormAuditLogger.log_state_transition(
            form_id=self.form_id,
            from_state=previous.to_dict(),
            to_state=self._state.to_dict(),
            error=self._state.error_message if isinstance(phase, Failed) else None
        )
        self._notify_listeners(previous)

    def _notify_listeners(self, previous: FormState) -> None:
        for listener in list(self._listeners):
            try:
                listener(previous, self._state)
            except Exception as e:
                ErrorHandler.handle_system_error(
                    code="LISTENER_ERROR",
                    service=self.form_type,
                    action="notify_listeners",
                    message=f"Listener failed on {previous.phase.name} -> {self._state.phase.name}",
                    error=e
                )
