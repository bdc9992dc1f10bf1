"""
Colour configuration.

Colours are blessed formatter names (``'bold'``, ``'black_on_white'``,
``'reverse'``...). An empty string means plain text.
"""

from dataclasses import dataclass, field


@dataclass
class Colors:
    """Formatter names for a control drawn without and with focus."""
    normal: str = ''
    focused: str = 'reverse'


@dataclass
class Theme:
    """Per-kind colours applied to controls that were given none of their own."""
    text: Colors = field(default_factory=Colors)
    property: Colors = field(default_factory=Colors)
    separator: Colors = field(default_factory=lambda: Colors('bold', 'bold'))
    space: Colors = field(default_factory=Colors)
    textbox: Colors = field(default_factory=lambda: Colors('', 'underline'))
    button: Colors = field(default_factory=Colors)
    checkbox: Colors = field(default_factory=Colors)
    radiobutton: Colors = field(default_factory=Colors)
    caret: str = 'reverse'
    error: str = 'red'

    def colors_for(self, kind) -> Colors:
        """Colours for a ControlKind."""
        return getattr(self, kind.value)


DEFAULT_THEME = Theme()
