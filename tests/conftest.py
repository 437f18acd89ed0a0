import pytest

from sublayouts.core.stack import Stack
from sublayouts.tiling.layouts import TallLayout
from sublayouts.tiling.rect import Rect
from sublayouts.tiling.workspace import Workspace


class FakeHost:
    """Minimal host: a window Stack plus a record of focus requests."""

    def __init__(self, windows=(), focus=None):
        stack = Stack.from_list(windows)
        if stack is not None and focus is not None:
            stack = stack.focus_on(focus)
        self.stack = stack
        self.focus_requests = []

    def replace_stack(self, stack):
        self.stack = stack

    def focus_window(self, window):
        self.focus_requests.append(window)
        if self.stack is not None:
            self.stack = self.stack.focus_on(window) or self.stack


@pytest.fixture
def make_host():
    return FakeHost


@pytest.fixture
def screen():
    return Rect(0, 0, 1000, 600)


@pytest.fixture
def tall_workspace(screen):
    """Workspace with windows a, b, c (stack [c, b, a], focus c), drawn once."""
    ws = Workspace(1, layouts=[TallLayout(gap=0)])
    for name in ("a", "b", "c"):
        ws.add_window(name)
    ws.redraw(screen)
    return ws
