"""
Keyboard events and the outcomes of dispatching them.

Keys read from the terminal are converted once into :class:`Key` values so the
rest of the toolkit never deals with raw escape sequences. Dispatching a key to
a control, row or dialog yields one of the :data:`KeyOutcome` variants.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .controls import Control

# Key names, following blessed's naming.
LEFT = 'KEY_LEFT'
RIGHT = 'KEY_RIGHT'
UP = 'KEY_UP'
DOWN = 'KEY_DOWN'
TAB = 'KEY_TAB'
BTAB = 'KEY_BTAB'
ENTER = 'KEY_ENTER'
ESCAPE = 'KEY_ESCAPE'
BACKSPACE = 'KEY_BACKSPACE'
DELETE = 'KEY_DELETE'
HOME = 'KEY_HOME'
END = 'KEY_END'
F5 = 'KEY_F5'

# Characters that blessed may hand back without a name.
_CHAR_NAMES = {
    '\t': TAB,
    '\r': ENTER,
    '\n': ENTER,
    '\x1b': ESCAPE,
    '\x08': BACKSPACE,
    '\x7f': BACKSPACE,
}


def normalize_shortcut(shortcut: str) -> str:
    """Return the lookup form of a shortcut spec.

    Single characters match case-insensitively; anything longer is taken as a
    key name such as ``KEY_F5``.
    """
    if len(shortcut) == 1:
        return shortcut.lower()
    return shortcut.upper()


@dataclass(frozen=True)
class Key:
    """A single keystroke.

    Attributes:
        name: Key name for control keys (``KEY_LEFT``, ``KEY_F5``...), None for
            printable characters
        char: The character typed, empty for most control keys
        shift, ctrl, alt: Modifier flags
    """
    name: Optional[str] = None
    char: str = ''
    shift: bool = False
    ctrl: bool = False
    alt: bool = False

    @classmethod
    def from_keystroke(cls, keystroke) -> 'Key':
        """Convert a blessed Keystroke."""
        text = str(keystroke)
        name = keystroke.name if keystroke.is_sequence else None
        if name is None:
            name = _CHAR_NAMES.get(text)
        if name == BTAB:
            return cls(name=TAB, shift=True)
        if name and name.startswith('KEY_SHIFT_'):
            return cls(name='KEY_' + name[len('KEY_SHIFT_'):], shift=True)
        if name and name.startswith('KEY_CTRL_'):
            return cls(name=name, ctrl=True)
        return cls(name=name, char='' if name else text)

    @classmethod
    def of(cls, spec: str) -> 'Key':
        """Build a key from a character or a key name."""
        if len(spec) == 1:
            return cls(char=spec)
        if spec == BTAB:
            return cls(name=TAB, shift=True)
        return cls(name=spec)

    @property
    def is_control(self) -> bool:
        return self.name is not None

    @property
    def is_printable(self) -> bool:
        return self.name is None and len(self.char) == 1 and self.char.isprintable()

    @property
    def is_space(self) -> bool:
        return self.name is None and self.char == ' '

    @property
    def is_back_tab(self) -> bool:
        return self.name == TAB and self.shift

    @property
    def shortcut_id(self) -> str:
        """Form used to look the key up in shortcut maps."""
        if self.name:
            return self.name
        return self.char.lower()

    def matches(self, shortcut: Optional[str]) -> bool:
        if not shortcut:
            return False
        return self.shortcut_id == normalize_shortcut(shortcut)


class Direction(Enum):
    UP = 'up'
    DOWN = 'down'


@dataclass(frozen=True)
class Consumed:
    """The key was used; nothing else to do."""


@dataclass(frozen=True)
class Unhandled:
    """The key did not apply; the next level up should try it."""
    key: Key


@dataclass(frozen=True)
class Activated:
    """A terminal control was activated and ends the input loop."""
    control: 'Control'


@dataclass(frozen=True)
class Reroute:
    """Focus should move to the adjacent row.

    ``column`` is the caret offset of the text box that asked for the move, so
    a text box on the destination row can keep the same horizontal position.
    """
    direction: Direction
    column: int
    key: Key


KeyOutcome = Union[Consumed, Unhandled, Activated, Reroute]

CONSUMED = Consumed()
