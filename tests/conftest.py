"""Shared fixtures: a scripted screen standing in for the terminal."""

from contextlib import contextmanager

import pytest

from term_forms import Key


class FakeScreen:
    """Records drawn frames and replays a fixed list of keys."""

    def __init__(self, keys=()):
        self.keys = [Key.of(k) if isinstance(k, str) else k for k in keys]
        self.frames = []
        self.rewound = []
        self.cursor_hidden = False
        self.in_input_mode = False

    def draw_lines(self, lines):
        frame = [''.join(text for text, _ in line) for line in lines]
        self.frames.append(frame)
        return len(frame)

    def rewind(self, lines):
        self.rewound.append(lines)

    def hide_cursor(self):
        self.cursor_hidden = True

    def show_cursor(self):
        self.cursor_hidden = False

    @contextmanager
    def input_mode(self):
        self.in_input_mode = True
        try:
            yield
        finally:
            self.in_input_mode = False

    def read_key(self):
        return self.keys.pop(0)

    @property
    def text(self):
        return '\n'.join(line for frame in self.frames for line in frame)


@pytest.fixture
def fake_screen():
    """Factory for FakeScreen instances fed with the given keys."""
    return FakeScreen
