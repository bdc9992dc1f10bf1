"""
Terminal Forms Library

Interactive dialogs for the terminal, built on the Blessed library.
Controls (text boxes, buttons, check boxes, radio buttons and static text) are
grouped into rows and assembled into a dialog whose input loop returns a typed
result describing which button ended it.
"""

from .controls import (
    Button,
    ButtonActivation,
    CheckBox,
    Control,
    ControlKind,
    Property,
    RadioButton,
    Separator,
    Space,
    Text,
    TextBox,
)
from .dialog import Dialog
from .errors import ConstructionError, FormsError, NotInvokableError
from .keys import Direction, Key
from .results import ActionResult, DialogSnapshot, ScriptblockResult, ValueResult
from .row import Orientation, Row
from .screen import Screen
from .theme import Colors, Theme

__all__ = [
    'ActionResult',
    'Button',
    'ButtonActivation',
    'CheckBox',
    'Colors',
    'ConstructionError',
    'Control',
    'ControlKind',
    'Dialog',
    'DialogSnapshot',
    'Direction',
    'FormsError',
    'Key',
    'NotInvokableError',
    'Orientation',
    'Property',
    'RadioButton',
    'Row',
    'Screen',
    'ScriptblockResult',
    'Separator',
    'Space',
    'Text',
    'TextBox',
    'Theme',
    'ValueResult',
]

__version__ = '0.1.0'
