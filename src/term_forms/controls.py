"""
Dialog controls.

Every control knows how to render itself as lines of styled segments, how wide
and tall it is, and how to react to a key. Static controls (text, property,
separator, space) never take focus; interactive ones (text box, button,
check box, radio button) do.
"""

import re
import weakref
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Pattern, Union

from . import keys
from .keys import CONSUMED, Activated, Direction, Key, KeyOutcome, Reroute, Unhandled
from .screen import Line, Screen
from .theme import DEFAULT_THEME, Colors

if TYPE_CHECKING:
    from .row import Row


class ControlKind(Enum):
    TEXT = 'text'
    PROPERTY = 'property'
    SEPARATOR = 'separator'
    SPACE = 'space'
    TEXTBOX = 'textbox'
    BUTTON = 'button'
    CHECKBOX = 'checkbox'
    RADIOBUTTON = 'radiobutton'


class ButtonActivation(Enum):
    VALUE = 'value'
    SCRIPTBLOCK = 'scriptblock'
    ACTION = 'action'
    ACTION_SCRIPTBLOCK = 'action_scriptblock'


def derive_name(text: str) -> str:
    """Turn display text into an identifier: ``'First name:'`` -> ``'first_name'``."""
    return re.sub(r'[^0-9A-Za-z]+', '_', text).strip('_').lower()


def line_width(line: Line) -> int:
    return sum(len(text) for text, _ in line)


class Control:
    """Base class for all controls.

    Attributes:
        shortcut: Key that activates or toggles the control from anywhere in
            its row (a character, matched case-insensitively, or a key name)
        colors: Colours for this control; None uses the dialog theme
    """

    kind: ControlKind
    is_interactive = False
    has_value = False

    def __init__(self, *, name: Optional[str] = None, shortcut: Optional[str] = None,
                 colors: Optional[Colors] = None):
        self._name = name
        self.shortcut = shortcut
        self.colors = colors

    def __repr__(self):
        return f'{type(self).__name__}({self.name!r})'

    @property
    def name(self) -> str:
        return self._name or derive_name(self.display_text()) or self.kind.value

    @name.setter
    def name(self, value: str):
        self._name = value

    def display_text(self) -> str:
        return ''

    @property
    def label(self) -> str:
        """Key used for this control's value when reporting by header."""
        return self.display_text()

    @property
    def is_radio_compatible(self) -> bool:
        return False

    def get_colors(self) -> Colors:
        return self.colors or DEFAULT_THEME.colors_for(self.kind)

    def render(self, focused: bool = False) -> List[Line]:
        raise NotImplementedError

    def measure_width(self) -> int:
        return max((line_width(line) for line in self.render()), default=0)

    def measure_height(self) -> int:
        return len(self.render())

    def draw(self, screen: Screen, focused: bool = False):
        screen.draw_lines(self.render(focused))

    def handle_key(self, key: Key) -> KeyOutcome:
        return Unhandled(key)

    def matches_shortcut(self, key: Key) -> bool:
        return key.matches(self.shortcut)

    def reset(self):
        """Restore the construction-time value. Static controls have none."""


class Text(Control):
    """One or more lines of static text."""

    kind = ControlKind.TEXT

    def __init__(self, text: Union[str, List[str]], **kwargs):
        super().__init__(**kwargs)
        self.text = "\n".join(text) if isinstance(text, (list, tuple)) else text

    def display_text(self) -> str:
        return self.text

    def render(self, focused=False):
        style = self.get_colors().normal
        return [[(line, style)] for line in self.text.splitlines() or ['']]


class Property(Control):
    """A read-only ``header : value`` line."""

    kind = ControlKind.PROPERTY
    has_value = True

    def __init__(self, header: str, value: Any = None, **kwargs):
        super().__init__(**kwargs)
        self.header = header
        self.value = value
        self.separator_location = len(header)

    def display_text(self) -> str:
        return self.header

    def render(self, focused=False):
        value = '' if self.value is None else str(self.value)
        return [[(f'{self.header.ljust(self.separator_location)} : {value}', self.get_colors().normal)]]


class Separator(Control):
    """A horizontal rule, optionally titled and carrying a page indicator.

    With ``auto_length`` the dialog sets ``length`` to its own width before
    drawing.
    """

    kind = ControlKind.SEPARATOR

    def __init__(self, text: Optional[str] = None, *, char: str = '-',
                 length: Optional[int] = None, auto_length: Optional[bool] = None,
                 page: Optional[int] = None, page_count: Optional[int] = None, **kwargs):
        super().__init__(**kwargs)
        self.text = text
        self.char = char
        self.length = length or 0
        self.auto_length = length is None if auto_length is None else auto_length
        self.page = page
        self.page_count = page_count

    def display_text(self) -> str:
        return self.text or ''

    def render(self, focused=False):
        head = f'{self.char * 2} {self.text} ' if self.text else ''
        pages = f' {self.page}/{self.page_count} ' if self.page_count else ''
        fill = max(0, self.length - len(head) - len(pages))
        return [[(head + self.char * fill + pages, self.get_colors().normal)]]


class Space(Control):
    """Blank filler used for layout."""

    kind = ControlKind.SPACE

    def __init__(self, width: int = 1, height: int = 1, **kwargs):
        super().__init__(**kwargs)
        self.width = width
        self.height = height

    def render(self, focused=False):
        return [[(' ' * self.width, '')] for _ in range(self.height)]


_UNVALIDATED = object()


class TextBox(Control):
    """Single-line editable text field with optional validation.

    Validation is either a regular expression (searched, not anchored) or a
    predicate taking the text. Its result is cached against the text that was
    validated, so an expensive predicate runs once per distinct edit.

    Attributes:
        header: Label drawn before the field
        password_char: When set, each character is drawn as this one
        field_name: Name used in error reports instead of the header
        error_message: Reason used in error reports instead of the generated one
        separator_location: Column the header is padded to
    """

    kind = ControlKind.TEXTBOX
    is_interactive = True
    has_value = True

    def __init__(self, header: str = '', text: str = '', *,
                 regex: Union[str, Pattern, None] = None,
                 validator: Optional[Callable[[str], bool]] = None,
                 password_char: Optional[str] = None,
                 field_name: Optional[str] = None,
                 error_message: Optional[str] = None,
                 min_width: int = 10,
                 caret: Optional[str] = None,
                 **kwargs):
        super().__init__(**kwargs)
        self.header = header
        self.regex = re.compile(regex) if isinstance(regex, str) else regex
        self.validator = validator
        self.password_char = password_char
        self.field_name = field_name
        self.error_message = error_message
        self.min_width = min_width
        self.caret = caret
        self.separator_location = len(header)
        self.original_text = text
        self._cursor_position = 0
        self.text = text
        self.cursor_position = len(text)

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str):
        self._text = value
        self._validated_text = _UNVALIDATED
        self._valid = False
        self.cursor_position = self._cursor_position

    @property
    def cursor_position(self) -> int:
        return self._cursor_position

    @cursor_position.setter
    def cursor_position(self, value: int):
        self._cursor_position = max(0, min(len(self._text), value))

    @property
    def value(self) -> str:
        return self._text

    @property
    def label(self) -> str:
        return self.header

    @property
    def field_label(self) -> str:
        return self.field_name or self.header or self.name

    def display_text(self) -> str:
        return self.header

    def masked_text(self) -> str:
        if self.password_char:
            return self.password_char * len(self._text)
        return self._text

    def seed_cursor(self, column: int):
        """Place the caret at ``column``, clamped to the text."""
        self.cursor_position = column

    def render(self, focused=False):
        colors = self.get_colors()
        shown = self.masked_text()
        width = max(self.min_width, len(shown) + 1)
        line = []
        if self.header:
            line.append((self.header.ljust(self.separator_location) + ' : ', ''))
        if not focused:
            line.append((shown.ljust(width), colors.normal))
            return [line]
        pos = self._cursor_position
        line.append((shown[:pos], colors.focused))
        line.append((shown[pos:pos + 1] or ' ', self.caret or DEFAULT_THEME.caret))
        line.append((shown[pos + 1:].ljust(width - pos - 1), colors.focused))
        return [line]

    def handle_key(self, key):
        pos = self._cursor_position
        match key.name:
            case keys.LEFT if pos > 0:
                self.cursor_position = pos - 1
            case keys.RIGHT if pos < len(self._text):
                self.cursor_position = pos + 1
            case keys.BACKSPACE:
                if pos > 0:
                    self._cursor_position = pos - 1
                    self.text = self._text[:pos - 1] + self._text[pos:]
            case keys.DELETE:
                if pos < len(self._text):
                    self.text = self._text[:pos] + self._text[pos + 1:]
            case keys.HOME:
                self.cursor_position = 0
            case keys.END:
                self.cursor_position = len(self._text)
            case keys.UP:
                return Reroute(Direction.UP, pos, key)
            case keys.DOWN:
                return Reroute(Direction.DOWN, pos, key)
            case None if key.is_printable:
                self._cursor_position = pos + 1
                self.text = self._text[:pos] + key.char + self._text[pos:]
            case _:
                return Unhandled(key)
        return CONSUMED

    def is_valid_text(self) -> bool:
        if self._validated_text is _UNVALIDATED or self._validated_text != self._text:
            self._valid = self._run_validation()
            self._validated_text = self._text
        return self._valid

    def _run_validation(self) -> bool:
        if self.regex is not None:
            return self.regex.search(self._text) is not None
        if self.validator is not None:
            return bool(self.validator(self._text))
        return True

    def validation_error(self) -> Optional[str]:
        """Why the current text is invalid, or None when it is valid."""
        if self.is_valid_text():
            return None
        if self.error_message:
            return self.error_message
        if self.regex is not None:
            return f"must match regex '{self.regex.pattern}'"
        return 'failed validation'

    def reset(self):
        self.text = self.original_text
        self.cursor_position = len(self.original_text)


class Button(Control):
    """A push button. Activating it ends the dialog's input loop.

    What the dialog returns depends on what the button carries: an ``action``
    name, a ``scriptblock`` callable, both, or a plain ``value``. A button that
    carries none of these is a navigation placeholder and lets Enter fall
    through to the dialog.
    """

    kind = ControlKind.BUTTON
    is_interactive = True

    def __init__(self, text: str, *, value: Any = None, action: Optional[str] = None,
                 scriptblock: Optional[Callable] = None, **kwargs):
        super().__init__(**kwargs)
        self.text = text
        self.value = value
        self.action = action
        self.scriptblock = scriptblock

    @property
    def activation_kind(self) -> ButtonActivation:
        if self.action is not None and self.scriptblock is not None:
            return ButtonActivation.ACTION_SCRIPTBLOCK
        if self.action is not None:
            return ButtonActivation.ACTION
        if self.scriptblock is not None:
            return ButtonActivation.SCRIPTBLOCK
        return ButtonActivation.VALUE

    @property
    def has_payload(self) -> bool:
        return self.value is not None or self.action is not None or self.scriptblock is not None

    def display_text(self) -> str:
        return self.text

    def render(self, focused=False):
        colors = self.get_colors()
        return [[(f'[ {self.text} ]', colors.focused if focused else colors.normal)]]

    def handle_key(self, key):
        if key.is_space or self.matches_shortcut(key):
            return Activated(self)
        if key.name == keys.ENTER and self.has_payload:
            return Activated(self)
        return Unhandled(key)


class _Toggle(Control):
    """Shared behaviour of check boxes and radio buttons."""

    is_interactive = True
    has_value = True
    on_glyph = ''
    off_glyph = ''

    def __init__(self, text: str, enabled: bool = False, *, bound_object: Any = None, **kwargs):
        super().__init__(**kwargs)
        self.text = text
        self.enabled = enabled
        self.original_enabled = enabled
        self.bound_object = bound_object

    @property
    def value(self) -> bool:
        return self.enabled

    def display_text(self) -> str:
        return self.text

    def render(self, focused=False):
        colors = self.get_colors()
        glyph = self.on_glyph if self.enabled else self.off_glyph
        return [[(f'{glyph} {self.text}', colors.focused if focused else colors.normal)]]

    def handle_key(self, key):
        if key.is_space or self.matches_shortcut(key):
            self.toggle()
            return CONSUMED
        return Unhandled(key)

    def toggle(self) -> bool:
        """Flip the checked state. Returns whether the state changed."""
        self.enabled = not self.enabled
        return True

    def reset(self):
        self.enabled = self.original_enabled


class CheckBox(_Toggle):
    kind = ControlKind.CHECKBOX
    on_glyph = '[x]'
    off_glyph = '[ ]'


class RadioButton(_Toggle):
    """One option of a group; the group is the row that owns it.

    The row is held through a weak reference and only consulted to switch the
    siblings off.
    """

    kind = ControlKind.RADIOBUTTON
    on_glyph = '(*)'
    off_glyph = '( )'

    def __init__(self, text: str, enabled: bool = False, **kwargs):
        super().__init__(text, enabled, **kwargs)
        self._row = None

    @property
    def row(self) -> Optional['Row']:
        return self._row() if self._row is not None else None

    def attach(self, row: 'Row'):
        self._row = weakref.ref(row)

    @property
    def is_radio_compatible(self) -> bool:
        return True

    def toggle(self) -> bool:
        row = self.row
        if self.enabled:
            if row is not None and row.mandatory_radio_value:
                return False
            self.enabled = False
            return True
        if row is not None:
            for sibling in row.content:
                if sibling is not self and isinstance(sibling, RadioButton):
                    sibling.enabled = False
        self.enabled = True
        return True
