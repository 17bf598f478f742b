import unittest

from core.error.types import ErrorKind, FormError
from core.state.form_state import (TRANSITIONS, Editing, Failed, FormState,
                                   Idle, Submitting, Succeeded, can_transition)


class TestPhases(unittest.TestCase):
    def setUp(self):
        self.error = FormError(kind=ErrorKind.REMOTE_REJECTION, message="Wrong current password")

    def test_every_phase_has_transitions(self):
        self.assertEqual(set(TRANSITIONS), {Idle, Editing, Submitting, Succeeded, Failed})

    def test_allowed_transitions(self):
        for current, target in (
            (Idle(), Editing()),
            (Editing(), Submitting()),
            (Editing(), Idle()),
            (Editing(), Failed(self.error)),
            (Submitting(), Succeeded()),
            (Submitting(), Failed(self.error)),
            (Succeeded(), Idle()),
            (Failed(self.error), Editing()),
        ):
            with self.subTest(current=current.name, target=target.name):
                self.assertTrue(can_transition(current, target))

    def test_forbidden_transitions(self):
        for current, target in (
            (Idle(), Submitting()),
            (Submitting(), Idle()),
            (Submitting(), Submitting()),
            (Succeeded(), Editing()),
            (Failed(self.error), Idle()),
        ):
            with self.subTest(current=current.name, target=target.name):
                self.assertFalse(can_transition(current, target))

    def test_phases_are_values(self):
        self.assertEqual(Idle(), Idle())
        self.assertEqual(Failed(self.error), Failed(self.error))
        self.assertEqual(Failed(self.error).name, "failed")


class TestFormState(unittest.TestCase):
    def setUp(self):
        self.state = FormState(phase=Editing(), fields={"newPassword": "hunter22"})

    def test_fields_are_read_only(self):
        with self.assertRaises(TypeError):
            self.state.fields["newPassword"] = "changed"

    def test_evolve_returns_new_state(self):
        error = FormError(kind=ErrorKind.TRANSPORT_FAILURE, message="Error changing password")
        evolved = self.state.evolve(error=error)
        self.assertIsNone(self.state.error)
        self.assertEqual(evolved.error_message, "Error changing password")
        self.assertEqual(evolved.fields, self.state.fields)

    def test_flags(self):
        self.assertTrue(self.state.is_open)
        self.assertFalse(self.state.is_submitting)
        self.assertFalse(FormState(phase=Idle(), fields={}).is_open)
        self.assertTrue(FormState(phase=Submitting(), fields={}).is_submitting)

    def test_to_dict_leaves_out_values(self):
        data = self.state.to_dict()
        self.assertEqual(data, {"phase": "editing", "fields": ["newPassword"], "error": None})
        self.assertNotIn("hunter22", str(data))


if __name__ == '__main__':
    unittest.main()
