"""Tests for the dialog input loop and its results."""

from unittest.mock import Mock

import pytest

from term_forms import (
    ActionResult, Button, CheckBox, Dialog, NotInvokableError, Row,
    ScriptblockResult, Separator, Text, TextBox, ValueResult,
)


class TestInvoke:
    """Tests for Dialog.invoke()."""

    def test_value_result(self, fake_screen):
        """Test that a value button produces a value result."""
        ok = Button('OK', value=42)
        screen = fake_screen([' '])
        dialog = Dialog([Text('Pick'), ok], screen=screen)

        result = dialog.invoke()

        assert isinstance(result, ValueResult)
        assert result.value == 42
        assert result.selected_properties is None
        assert result.snapshot.control is ok
        assert result.snapshot.dialog is dialog
        assert result.snapshot.form_is_valid is True

    def test_static_rows_drawn_once(self, fake_screen):
        screen = fake_screen(['KEY_TAB', 'KEY_TAB', ' '])
        dialog = Dialog([Text('Header'), Row(Button('A', value=1), Button('B', value=2))],
                        screen=screen)

        result = dialog.invoke()

        assert result.value == 1
        assert screen.frames[0] == ['Header']
        assert sum(frame == ['Header'] for frame in screen.frames) == 1
        # One frame per key plus the final one.
        assert len(screen.frames) == 1 + 3 + 1
        assert screen.rewound == [1, 1, 1]

    def test_dynamic_frames_show_focus_changes(self, fake_screen):
        screen = fake_screen(['KEY_RIGHT', ' '])
        dialog = Dialog([Row(Button('A', value=1), Button('B', value=2))], screen=screen)

        assert dialog.invoke().value == 2

    def test_cursor_restored_and_input_mode_left(self, fake_screen):
        screen = fake_screen(['KEY_ESCAPE', ' '])
        dialog = Dialog([Button('OK', value=1)], screen=screen)
        dialog.invoke()

        assert screen.cursor_hidden is False
        assert screen.in_input_mode is False

    def test_cursor_restored_on_error(self, fake_screen):
        screen = fake_screen([])
        dialog = Dialog([Button('OK', value=1)], screen=screen)

        with pytest.raises(IndexError):
            dialog.invoke()
        assert screen.cursor_hidden is False

    def test_auto_separators_fit_dialog_width(self, fake_screen):
        screen = fake_screen([' '])
        dialog = Dialog([Text('Hello world'), Separator(), Button('OK', value=1)], screen=screen)
        dialog.invoke()

        assert screen.frames[0] == ['Hello world', '-' * 11]

    def test_selected_properties_passed_through(self, fake_screen):
        dialog = Dialog([Button('OK', value='row')], screen=fake_screen([' ']),
                        selected_properties=['Name', 'Id'])

        assert dialog.invoke().selected_properties == ['Name', 'Id']

    def test_escape_gives_cancel_action(self, fake_screen):
        dialog = Dialog([TextBox('Name'), Button('Cancel', action='Cancel')],
                        screen=fake_screen(['KEY_ESCAPE']))
        result = dialog.invoke()

        assert isinstance(result, ActionResult)
        assert result.name == 'Cancel'
        assert result.is_cancel is True
        assert result.depth is None

    def test_back_action_has_depth(self, fake_screen):
        dialog = Dialog([Button('Back', action='Back')], screen=fake_screen([' ']))
        result = dialog.invoke()

        assert result.name == 'Back'
        assert result.depth == 0
        assert result.is_cancel is False

    def test_action_with_callable(self, fake_screen):
        """Test that an action button carrying a callable returns it as the value."""
        callback = Mock()
        dialog = Dialog([Button('Run', action='Run', scriptblock=callback)],
                        screen=fake_screen([' ']))
        result = dialog.invoke()

        assert isinstance(result, ActionResult)
        assert result.value is callback

    def test_action_value(self, fake_screen):
        dialog = Dialog([Button('Open', action='Open', value='file.txt')],
                        screen=fake_screen([' ']))
        assert dialog.invoke().value == 'file.txt'

    def test_scriptblock_result(self, fake_screen):
        callback = Mock(return_value='done')
        dialog = Dialog([Button('Go', scriptblock=callback)], screen=fake_screen([' ']))
        result = dialog.invoke()

        assert isinstance(result, ScriptblockResult)
        assert result.callable is callback
        assert result.run(1, flag=True) == 'done'
        callback.assert_called_once_with(1, flag=True)

    def test_invoke_resets_values(self, fake_screen):
        name = TextBox('Name', 'orig')
        dialog = Dialog([name, Button('OK', action='Validate')],
                        screen=fake_screen(['a', 'KEY_ENTER']))
        name.text = 'changed'

        result = dialog.invoke()

        assert result.name == 'Validate'
        assert dialog.get_value() == {'Name': 'origa'}

    def test_invoke_keeps_values(self, fake_screen):
        name = TextBox('Name', 'orig')
        dialog = Dialog([name, Button('OK', action='Validate')],
                        screen=fake_screen(['KEY_ENTER']))
        name.text = 'changed'

        dialog.invoke(keep_values=True)

        assert name.text == 'changed'

    def test_invalid_form_reported_in_snapshot(self, fake_screen):
        dialog = Dialog([TextBox('Name', regex=r'^.{2,}$'), Button('OK', action='Validate')],
                        screen=fake_screen(['J', 'KEY_ENTER']))
        result = dialog.invoke()

        assert result.name == 'Validate'
        assert result.snapshot.form_is_valid is False

    def test_no_focusable_rows(self, fake_screen):
        dialog = Dialog([Text('Just text')], screen=fake_screen([]))

        with pytest.raises(NotInvokableError):
            dialog.invoke()


class TestInvokeValidating:
    """Tests for Dialog.invoke_validating()."""

    @pytest.fixture(autouse=True)
    def _screen_factory(self, fake_screen):
        self.fake_screen = fake_screen

    def make(self, keys, **kwargs):
        self.screen = self.fake_screen(keys)
        self.name = TextBox('Name', regex=r'^.{2,}$')
        return Dialog(
            [self.name, Row(Button('OK', action='Validate'), Button('Cancel', action='Cancel'))],
            screen=self.screen,
            **kwargs,
        )

    def test_loops_until_valid(self):
        """Test that an invalid submission redisplays and blocks again."""
        dialog = self.make(['J', 'KEY_ENTER', 'o', 'KEY_ENTER'])

        result = dialog.invoke_validating()

        assert result.name == 'Validate'
        assert result.snapshot.form_is_valid is True
        assert self.name.text == 'Jo'
        assert 'Some fields are not valid' in self.screen.text
        assert self.screen.keys == []

    def test_cancel_short_circuits(self):
        dialog = self.make(['KEY_ESCAPE'])

        result = dialog.invoke_validating()

        assert result.is_cancel is True
        assert dialog.is_valid_form() is False
        assert 'Some fields are not valid' not in self.screen.text

    def test_valid_first_time(self):
        dialog = self.make(['a', 'b', 'KEY_ENTER'])

        assert dialog.invoke_validating().name == 'Validate'
        assert 'Some fields are not valid' not in self.screen.text

    def test_error_details(self):
        dialog = self.make(['KEY_ENTER', 'a', 'b', 'KEY_ENTER'], show_error_details=True,
                           validation_message='Fix the form')
        dialog.invoke_validating()

        assert 'Fix the form' in self.screen.text
        assert "  Name: must match regex '^.{2,}$'" in self.screen.text

    def test_silent_errors(self):
        dialog = self.make(['KEY_ENTER', 'a', 'b', 'KEY_ENTER'], show_validation_errors=False)
        dialog.invoke_validating()

        assert 'Some fields are not valid' not in self.screen.text

    def test_pause_after_errors_reads_a_key(self):
        dialog = self.make(['KEY_ENTER', 'x', 'a', 'b', 'KEY_ENTER'], pause_after_errors=True)
        dialog.invoke_validating()

        assert 'Press any key to continue' in self.screen.text
        # The 'x' was swallowed by the pause.
        assert self.name.text == 'ab'

    def test_value_button_still_needs_valid_form(self):
        screen = self.fake_screen([
            'KEY_TAB', 'KEY_TAB', ' ', 'KEY_TAB', 'z', 'z', 'KEY_TAB', 'KEY_TAB', ' ',
        ])
        name = TextBox('Name', regex=r'^.{2,}$')
        dialog = Dialog([name, CheckBox('Remember'), Button('Save', value='save')],
                        screen=screen)

        result = dialog.invoke_validating()

        assert result.value == 'save'
        assert name.text == 'zz'
