"""
The dialog engine.

A :class:`Dialog` is built from rows (bare controls are wrapped in a row of
their own) and run with :meth:`Dialog.invoke`. Rows up to the first one that
can take focus are drawn once; that row and everything after it form the
dynamic block, which is redrawn in place after every key.

Each key goes to the focused row, which passes it to its focused control.
Whatever a level cannot use comes back up as ``Unhandled`` and the next level
up gets to interpret it: an arrow key at the edge of a row moves to the next
row, Tab at the last control of the last row wraps to the first, Enter falls
through to the validate button, and so on. The loop ends when a button is
activated, and the dialog returns a result built from that button.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from . import keys
from .controls import Button, CheckBox, Control, ControlKind, Property, Separator, TextBox, _Toggle
from .errors import ConstructionError, NotInvokableError
from .keys import Activated, Consumed, Direction, Key, Reroute, Unhandled
from .results import ActionResult, Result, build_result
from .row import Row
from .screen import Line, Screen
from .theme import DEFAULT_THEME, Theme

log = logging.getLogger(__name__)

CANCEL_ACTION = 'Cancel'
VALIDATE_ACTION = 'Validate'
REFRESH_ACTION = 'Refresh'


class Dialog:
    """An interactive form made of rows of controls.

    Args:
        rows: Rows or bare controls, in display order
        screen: Terminal collaborator; a Screen over a new Blessed Terminal
            is created on first invocation when omitted
        theme: Colours given to controls that have none of their own
        escape_target: Button activated by Escape; defaults to the first
            button whose action is ``Cancel``
        validate_target: Button activated by an otherwise unused Enter;
            defaults to the first ``Validate`` button
        refresh_target: Button activated by F5; defaults to the first
            ``Refresh`` button
        hidden_shortcuts: Buttons reachable only through their shortcut key;
            they are never drawn
        initial_focused_row: Index of the focusable row that starts focused
        selected_objects: List kept in step with bound check boxes toggled
            with Space
        unique_property: Key or attribute identifying objects in
            ``selected_objects``
        selected_properties: Passed through to value results
        show_validation_errors: Print a message when a validating invocation
            ends on an invalid form
        show_error_details: Also print one line per invalid field
        pause_after_errors: Wait for a key after printing validation errors
        validation_message: The message printed for an invalid form
    """

    def __init__(
        self,
        rows: Iterable[Union[Row, Control]],
        *,
        screen: Optional[Screen] = None,
        theme: Optional[Theme] = None,
        escape_target: Optional[Button] = None,
        validate_target: Optional[Button] = None,
        refresh_target: Optional[Button] = None,
        hidden_shortcuts: Iterable[Button] = (),
        initial_focused_row: int = 0,
        selected_objects: Optional[List[Any]] = None,
        unique_property: Optional[str] = None,
        selected_properties: Optional[List[str]] = None,
        show_validation_errors: bool = True,
        show_error_details: bool = False,
        pause_after_errors: bool = False,
        validation_message: str = 'Some fields are not valid',
    ):
        self.screen = screen
        self.theme = theme or DEFAULT_THEME
        self.rows: List[Row] = [self._as_row(item) for item in rows]
        self.selected_objects = selected_objects
        self.unique_property = unique_property
        self.selected_properties = selected_properties
        self.show_validation_errors = show_validation_errors
        self.show_error_details = show_error_details
        self.pause_after_errors = pause_after_errors
        self.validation_message = validation_message

        self.hidden_shortcuts: Dict[str, Button] = {}
        for button in hidden_shortcuts:
            if not isinstance(button, Button) or not button.shortcut:
                raise ConstructionError(
                    f"Hidden shortcuts must be buttons with a shortcut, got {button!r}"
                )
            self.hidden_shortcuts[keys.normalize_shortcut(button.shortcut)] = button

        for name, target in (('escape_target', escape_target),
                             ('validate_target', validate_target),
                             ('refresh_target', refresh_target)):
            if target is not None and not isinstance(target, Button):
                raise ConstructionError(f"{name} must be a Button, got {type(target).__name__}")
        self.escape_target = escape_target or self._find_action(CANCEL_ACTION)
        self.validate_target = validate_target or self._find_action(VALIDATE_ACTION)
        self.refresh_target = refresh_target or self._find_action(REFRESH_ACTION)

        self._apply_theme()
        self._classify()
        self.align_headers()
        self.focused_row = max(0, min(initial_focused_row, len(self.objects_index) - 1))
        log.debug(
            "Dialog built: %d static rows, %d dynamic rows, %d focusable",
            len(self.static_rows), len(self.dynamic_rows), len(self.objects_index),
        )

    @staticmethod
    def _as_row(item) -> Row:
        if isinstance(item, Row):
            return item
        if isinstance(item, Control):
            return Row(item)
        raise ConstructionError(f"Dialog items must be rows or controls, got {type(item).__name__}")

    def _find_action(self, action: str) -> Optional[Button]:
        for control in self.controls():
            if isinstance(control, Button) and control.action == action:
                log.debug("Using %r as the %s target", control, action)
                return control
        return None

    def _apply_theme(self):
        for control in self.controls():
            if control.colors is None:
                control.colors = self.theme.colors_for(control.kind)
            if isinstance(control, TextBox) and control.caret is None:
                control.caret = self.theme.caret

    def _classify(self):
        """Split rows into the static prefix and the dynamic block.

        Every row from the first focusable one onwards is dynamic, whether or
        not it can take focus itself.
        """
        self.static_rows: List[Row] = []
        self.dynamic_rows: List[Row] = []
        self.objects_index: List[int] = []
        crossed_into_dynamic = False
        for index, row in enumerate(self.rows):
            if row.is_dynamic_object:
                self.objects_index.append(index)
                crossed_into_dynamic = True
            if crossed_into_dynamic:
                self.dynamic_rows.append(row)
            else:
                self.static_rows.append(row)
        self.all_buttons: Dict[str, Control] = {}
        for row in self.rows:
            for shortcut, control in row.shortcut_controls().items():
                self.all_buttons.setdefault(shortcut, control)

    def add_row(self, item: Union[Row, Control]) -> Row:
        """Append a row. Headers are not realigned; call :meth:`align_headers`."""
        row = self._as_row(item)
        self.rows.append(row)
        self._apply_theme()
        self._classify()
        return row

    def align_headers(self) -> int:
        """Pad every row, text box and property header to the longest one.

        Returns the common separator column.
        """
        labelled = [row for row in self.rows if row.header]
        labelled.extend(c for c in self.controls() if isinstance(c, (TextBox, Property)))
        longest = max((len(item.header or '') for item in labelled), default=0)
        for item in labelled:
            item.separator_location = longest
        return longest

    def controls(self) -> List[Control]:
        return [control for row in self.rows for control in row.content]

    def text_boxes(self) -> List[TextBox]:
        return [c for c in self.controls() if isinstance(c, TextBox)]

    def get_focused_row(self) -> Optional[Row]:
        if not self.objects_index:
            return None
        return self.rows[self.objects_index[self.focused_row]]

    def get_focused_control(self) -> Optional[Control]:
        row = self.get_focused_row()
        return row.focused_control if row is not None else None

    # Focus

    def move_focus(self, direction: Direction, column: Optional[int] = None,
                   enter_last: bool = False, align: bool = True) -> bool:
        """Move focus to the adjacent focusable row. Returns False at the edges.

        With ``align`` and buttons in both rows, the new row focuses the
        member under the previous row's focused member. ``column`` is a
        caret offset to carry over into a text box.
        """
        target = self.focused_row + (-1 if direction is Direction.UP else 1)
        if not 0 <= target < len(self.objects_index):
            return False
        previous = self.get_focused_row()
        self.focused_row = target
        row = self.get_focused_row()
        if enter_last:
            row.focus_last()
        else:
            row.focus_first()
        if (align and previous.contains_kind(ControlKind.BUTTON)
                and row.contains_kind(ControlKind.BUTTON)):
            row.focus_column(previous.column_of_focused())
        control = row.focused_control
        if column is not None and isinstance(control, TextBox):
            control.seed_cursor(column)
        log.debug("Focus moved %s to row %d (%r)", direction.value, target, control)
        return True

    def tab(self, backward: bool = False):
        """Move to the next (or previous) focusable row, wrapping around."""
        if not self.objects_index:
            return
        step = -1 if backward else 1
        self.focused_row = (self.focused_row + step) % len(self.objects_index)
        row = self.get_focused_row()
        if backward:
            row.focus_last()
        else:
            row.focus_first()

    # Key dispatch

    def press_key(self, key: Key) -> Optional[Button]:
        """Dispatch one key. Returns the button that ends the loop, if any."""
        row = self.get_focused_row()
        outcome = row.handle_key(key) if row is not None else Unhandled(key)
        match outcome:
            case Activated(control=control):
                return control
            case Reroute(direction=direction, column=column):
                self.move_focus(direction, column)
            case Consumed():
                if key.is_space:
                    self._sync_selection(row.focused_control)
            case Unhandled():
                return self._handle_unhandled(key, row)
        return None

    def _handle_unhandled(self, key: Key, row: Optional[Row]) -> Optional[Button]:
        if key.is_back_tab:
            self.tab(backward=True)
            return None
        match key.name:
            case keys.UP:
                self.move_focus(Direction.UP)
            case keys.DOWN:
                self.move_focus(Direction.DOWN)
            case keys.LEFT:
                self.move_focus(Direction.UP, enter_last=True, align=False)
            case keys.RIGHT:
                self.move_focus(Direction.DOWN, align=False)
            case keys.TAB:
                self.tab()
            case keys.ESCAPE:
                return self.escape_target
            case keys.ENTER:
                return self._press_enter(row)
            case keys.F5:
                return self.refresh_target or self._run_shortcut(key, row)
            case None if key.is_space:
                self._toggle_focused()
            case _:
                return self._run_shortcut(key, row)
        return None

    def _press_enter(self, row: Optional[Row]) -> Optional[Button]:
        if row is not None and row.is_homogeneous(ControlKind.BUTTON):
            control = row.focused_control
            if control is not None and control.has_payload:
                return control
        return self.validate_target

    def _run_shortcut(self, key: Key, row: Optional[Row]) -> Optional[Button]:
        target = self.hidden_shortcuts.get(key.shortcut_id) or self.all_buttons.get(key.shortcut_id)
        if target is None:
            return None
        if isinstance(target, Button):
            return target
        # The focused row already toggled its own members.
        if row is not None and target in row.content:
            return None
        target.toggle()
        return None

    def _toggle_focused(self):
        control = self.get_focused_control()
        if isinstance(control, _Toggle):
            control.toggle()
            self._sync_selection(control)

    def _sync_selection(self, control: Optional[Control]):
        """Keep ``selected_objects`` in step with a bound check box.

        Only Space toggles reach here; shortcut toggles leave the list alone.
        """
        if (not isinstance(control, CheckBox) or control.bound_object is None
                or self.selected_objects is None or not self.unique_property):
            return
        key = self._unique_value(control.bound_object)
        present = any(self._unique_value(item) == key for item in self.selected_objects)
        if control.enabled and not present:
            self.selected_objects.append(control.bound_object)
        elif not control.enabled and present:
            self.selected_objects[:] = [
                item for item in self.selected_objects if self._unique_value(item) != key
            ]

    def _unique_value(self, item) -> Any:
        if isinstance(item, dict):
            return item.get(self.unique_property)
        return getattr(item, self.unique_property, None)

    # Drawing and the input loop

    def _fit_separators(self):
        width = max(
            (row.measure_width() for row in self.rows
             if not any(isinstance(c, Separator) and c.auto_length for c in row.content)),
            default=0,
        )
        for control in self.controls():
            if isinstance(control, Separator) and control.auto_length:
                control.length = width

    def _render(self, rows: List[Row]) -> List[Line]:
        focused = self.get_focused_row()
        lines = []
        for row in rows:
            lines.extend(row.render(row is focused))
        return lines

    def _ensure_screen(self) -> Screen:
        if self.screen is None:
            self.screen = Screen()
        return self.screen

    def _invoke(self) -> Button:
        screen = self._ensure_screen()
        self._fit_separators()
        screen.draw_lines(self._render(self.static_rows))
        control = None
        with screen.input_mode():
            try:
                while control is None:
                    screen.hide_cursor()
                    height = screen.draw_lines(self._render(self.dynamic_rows))
                    key = screen.read_key()
                    control = self.press_key(key)
                    screen.rewind(height)
            finally:
                screen.show_cursor()
        screen.draw_lines(self._render(self.dynamic_rows))
        log.debug("Dialog ended by %r", control)
        return control

    def invoke(self, keep_values: bool = False) -> Result:
        """Run the input loop until a button ends it.

        Args:
            keep_values: Keep the current control values instead of resetting
                them to their construction-time values first

        Raises:
            NotInvokableError: If no row can take focus
        """
        if not self.objects_index:
            raise NotInvokableError(
                "Dialog.invoke() called with no focusable rows. "
                "Add a text box, button, check box or radio button."
            )
        if not keep_values:
            self.reset()
        return build_result(self._invoke(), self)

    def invoke_validating(self, keep_values: bool = False) -> Result:
        """Like :meth:`invoke`, but repeat until the form is valid or cancelled."""
        result = self.invoke(keep_values)
        while True:
            if isinstance(result, ActionResult) and result.is_cancel:
                return result
            if self.is_valid_form():
                return result
            log.debug("Form invalid: %s", self.get_errors())
            self._show_errors()
            result = self.invoke(keep_values=True)

    def _show_errors(self):
        screen = self._ensure_screen()
        lines = []
        if self.show_validation_errors:
            lines.append([(self.validation_message, self.theme.error)])
            if self.show_error_details:
                for field_name, reason in self.get_errors().items():
                    lines.append([(f'  {field_name}: {reason}', self.theme.error)])
        if self.pause_after_errors:
            lines.append([('Press any key to continue', '')])
        screen.draw_lines(lines)
        if self.pause_after_errors:
            with screen.input_mode():
                screen.read_key()

    def reset(self):
        """Restore every control to its construction-time value."""
        for row in self.rows:
            row.reset()
        for button in self.hidden_shortcuts.values():
            button.reset()

    # Queries

    def get_value(self, use_name: bool = False) -> Dict[str, Any]:
        """Current values of the value-bearing controls, in display order.

        Radio groups report one value for the whole row. Keys are headers or
        display texts, or control names with ``use_name``.
        """
        values = {}
        for row in self.rows:
            if row.is_radio_group():
                values[row.label(use_name)] = row.get_value()
                continue
            for control in row.content:
                if control.has_value:
                    values[control.name if use_name else control.label] = control.value
        return values

    def is_valid_form(self) -> bool:
        return all(text_box.is_valid_text() for text_box in self.text_boxes())

    def get_errors(self) -> Dict[str, str]:
        """Reason each invalid text box fails, keyed by field name."""
        return {
            text_box.field_label: text_box.validation_error()
            for text_box in self.text_boxes()
            if not text_box.is_valid_text()
        }
