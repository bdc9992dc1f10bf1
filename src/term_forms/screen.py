"""
Terminal output and keyboard input for dialogs.

The dialog engine never talks to the terminal directly; it draws lines of
styled segments and reads keys through a :class:`Screen`, which wraps a
Blessed Terminal.
"""

from contextlib import contextmanager
from typing import Iterable, List, Optional, Tuple

from blessed import Terminal

from .keys import Key

Segment = Tuple[str, str]
Line = List[Segment]


class Screen:
    """Line-oriented drawing surface over a Blessed Terminal.

    Dialogs are drawn inline, below whatever is already on screen. The part of
    a dialog that changes is redrawn in place by moving the cursor back up
    over it (:meth:`rewind`) before drawing the next frame.

    Attributes:
        term: Blessed Terminal instance
    """

    def __init__(self, term: Optional[Terminal] = None):
        self.term = term or Terminal()

    @property
    def width(self) -> int:
        return self.term.width

    def style(self, text: str, formatter: str) -> str:
        """Apply a blessed formatter by name, such as ``'bold'`` or ``'black_on_white'``."""
        if not formatter or not text:
            return text
        return getattr(self.term, formatter)(text)

    def write(self, text: str, formatter: str = ''):
        print(self.style(text, formatter), end='')

    def draw_lines(self, lines: Iterable[Line]) -> int:
        """Draw lines of ``(text, formatter)`` segments, clearing stale text.

        Returns the number of lines drawn.
        """
        count = 0
        for segments in lines:
            for text, formatter in segments:
                self.write(text, formatter)
            print(self.term.clear_eol, end='\n')
            count += 1
        print('', end='', flush=True)
        return count

    def rewind(self, lines: int):
        """Move the cursor back to the start of the last ``lines`` drawn lines."""
        if lines > 0:
            print('\r' + self.term.move_up(lines), end='', flush=True)

    def hide_cursor(self):
        print(self.term.hide_cursor, end='', flush=True)

    def show_cursor(self):
        print(self.term.normal_cursor, end='', flush=True)

    @contextmanager
    def input_mode(self):
        """Put the terminal in cbreak mode so keys arrive one at a time."""
        with self.term.cbreak():
            yield

    def read_key(self) -> Key:
        """Block until a key is pressed."""
        keystroke = self.term.inkey()
        return Key.from_keystroke(keystroke)
