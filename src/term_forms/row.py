"""
Rows group controls on one line (horizontal) or in a column (vertical).

A row is the unit of focus for the dialog: it owns which of its interactive
controls is focused, moves that focus with the arrow keys and Tab, and runs
the shortcut keys of its members. Keys it cannot use are handed back as
:class:`~term_forms.keys.Unhandled` for the dialog to interpret.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from . import keys
from .controls import Button, Control, ControlKind, RadioButton, TextBox, _Toggle
from .errors import ConstructionError
from .keys import CONSUMED, Activated, Direction, Key, KeyOutcome, Reroute, Unhandled
from .screen import Line, Screen

log = logging.getLogger(__name__)


class Orientation(Enum):
    HORIZONTAL = 'horizontal'
    VERTICAL = 'vertical'


class Row:
    """An ordered group of controls.

    Attributes:
        content: The member controls, in display order
        focusable_indices: Indices into ``content`` of the interactive members
        focused_item: Index into ``focusable_indices`` of the focused member
        orientation: Whether members sit side by side or one per line
        header: Optional label drawn before the members
        mandatory_radio_value: Forbid switching off the selected radio button
        spacing: Blank columns between members of a horizontal row
    """

    def __init__(self, *controls: Control, orientation: Orientation = Orientation.HORIZONTAL,
                 header: Optional[str] = None, name: Optional[str] = None,
                 mandatory_radio_value: bool = False, spacing: int = 2):
        if len(controls) == 1 and isinstance(controls[0], (list, tuple)):
            controls = tuple(controls[0])
        for control in controls:
            if not isinstance(control, Control):
                raise ConstructionError(
                    f"Row members must be controls, got {type(control).__name__}"
                )
        self.content: List[Control] = list(controls)
        self.orientation = orientation
        self.header = header
        self._name = name
        self.mandatory_radio_value = mandatory_radio_value
        self.spacing = spacing
        self.separator_location = len(header) if header else 0
        self.focusable_indices = [i for i, c in enumerate(self.content) if c.is_interactive]
        self.focused_item = 0
        for control in self.content:
            if isinstance(control, RadioButton):
                control.attach(self)

    def __repr__(self):
        return f'Row({", ".join(repr(c) for c in self.content)})'

    @property
    def name(self) -> str:
        if self._name:
            return self._name
        if self.header:
            return self.header
        return '_'.join(c.name for c in self.content)

    def label(self, use_name: bool = False) -> str:
        if use_name:
            return self.name
        return self.header or self.name

    @property
    def is_dynamic_object(self) -> bool:
        """Whether any member can take focus."""
        return bool(self.focusable_indices)

    def is_radio_group(self) -> bool:
        members = [c for c in self.content if c.kind is not ControlKind.SPACE]
        return bool(members) and all(c.is_radio_compatible for c in members)

    def is_homogeneous(self, kind: ControlKind) -> bool:
        return bool(self.content) and all(c.kind is kind for c in self.content)

    def contains_kind(self, kind: ControlKind) -> bool:
        return any(c.kind is kind for c in self.content)

    @property
    def focusable_controls(self) -> List[Control]:
        return [self.content[i] for i in self.focusable_indices]

    @property
    def focused_control(self) -> Optional[Control]:
        if not self.focusable_indices:
            return None
        return self.content[self.focusable_indices[self.focused_item]]

    def focus_first(self):
        self.focused_item = 0

    def focus_last(self):
        self.focused_item = max(0, len(self.focusable_indices) - 1)

    def focus_control(self, control: Control) -> bool:
        for item, index in enumerate(self.focusable_indices):
            if self.content[index] is control:
                self.focused_item = item
                return True
        return False

    def column_of_focused(self) -> int:
        """Horizontal midpoint, in columns, of the focused member."""
        widths = [c.measure_width() for c in self.focusable_controls]
        if not widths:
            return 0
        return sum(widths[:self.focused_item]) + widths[self.focused_item] // 2

    def focus_column(self, column: int):
        """Focus the member that covers ``column``, or the last one past the end."""
        columns = []
        for item, control in enumerate(self.focusable_controls):
            columns.extend([item] * control.measure_width())
        if columns:
            self.focused_item = columns[min(max(0, column), len(columns) - 1)]

    def shortcut_controls(self) -> Dict[str, Control]:
        """Shortcut-bearing buttons, check boxes and radio buttons by shortcut."""
        found = {}
        for control in self.content:
            if control.shortcut and isinstance(control, (Button, _Toggle)):
                found.setdefault(keys.normalize_shortcut(control.shortcut), control)
        return found

    def _step(self, delta: int) -> bool:
        target = self.focused_item + delta
        if 0 <= target < len(self.focusable_indices):
            self.focused_item = target
            return True
        return False

    def handle_key(self, key: Key) -> KeyOutcome:
        control = self.focused_control
        if control is None:
            return Unhandled(key)

        outcome = control.handle_key(key)
        match outcome:
            case Unhandled():
                return self._navigate(key)
            case Reroute(direction=direction, column=column) if self.orientation is Orientation.VERTICAL:
                if not self._step(-1 if direction is Direction.UP else 1):
                    return outcome
                target = self.focused_control
                if isinstance(target, TextBox):
                    target.seed_cursor(column)
                return CONSUMED
            case _:
                return outcome

    def _navigate(self, key: Key) -> KeyOutcome:
        if key.is_back_tab:
            return CONSUMED if self._step(-1) else Unhandled(key)

        horizontal = self.orientation is Orientation.HORIZONTAL
        match key.name:
            case keys.TAB:
                return CONSUMED if self._step(1) else Unhandled(key)
            case keys.LEFT | keys.RIGHT if horizontal:
                return CONSUMED if self._step(-1 if key.name == keys.LEFT else 1) else Unhandled(key)
            case keys.UP | keys.DOWN if not horizontal:
                return CONSUMED if self._step(-1 if key.name == keys.UP else 1) else Unhandled(key)
            case keys.LEFT | keys.RIGHT | keys.UP | keys.DOWN:
                return Unhandled(key)
        return self._run_shortcut(key)

    def _run_shortcut(self, key: Key) -> KeyOutcome:
        focused = self.focused_control
        for control in self.content:
            if control is focused or not control.matches_shortcut(key):
                continue
            if isinstance(control, Button):
                return Activated(control)
            if isinstance(control, _Toggle):
                control.toggle()
                log.debug("Shortcut %r toggled %r", key.shortcut_id, control)
                # Bound toggles hand the key on so the dialog sees it.
                if control.bound_object is not None:
                    return Unhandled(key)
                return CONSUMED
        return Unhandled(key)

    def get_value(self) -> Any:
        """Value of a radio group: the selected member's bound object or text."""
        for control in self.content:
            if isinstance(control, RadioButton) and control.enabled:
                if control.bound_object is not None:
                    return control.bound_object
                return control.text
        return None

    def reset(self):
        for control in self.content:
            control.reset()

    def _header_segment(self, first: bool):
        if not self.header:
            return []
        if not first:
            return [(' ' * (self.separator_location + 3), '')]
        return [(self.header.ljust(self.separator_location) + ' : ', '')]

    def render(self, focused: bool = False) -> List[Line]:
        focused_control = self.focused_control if focused else None
        blocks = [
            (c.render(c is focused_control), c.measure_width())
            for c in self.content
        ]
        if self.orientation is Orientation.VERTICAL:
            lines = []
            for block, _ in blocks:
                for line in block:
                    lines.append(self._header_segment(not lines) + line)
            return lines

        height = max((len(block) for block, _ in blocks), default=0)
        lines = []
        gap = (' ' * self.spacing, '')
        for index in range(height):
            line = self._header_segment(index == 0)
            for position, (block, width) in enumerate(blocks):
                if position:
                    line.append(gap)
                if index < len(block):
                    segments = block[index]
                    used = sum(len(text) for text, _ in segments)
                    line.extend(segments)
                else:
                    used = 0
                if used < width:
                    line.append((' ' * (width - used), ''))
            lines.append(line)
        return lines

    def measure_width(self) -> int:
        return max((sum(len(text) for text, _ in line) for line in self.render()), default=0)

    def measure_height(self) -> int:
        return len(self.render())

    def draw(self, screen: Screen, focused: bool = False):
        screen.draw_lines(self.render(focused))
