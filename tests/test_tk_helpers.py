import tkinter as tk

import pytest

from utils.tk_helpers import unbind_handler


@pytest.fixture
def root():
    try:
        window = tk.Tk()
    except tk.TclError:
        pytest.skip("no display available")
    window.withdraw()
    yield window
    window.destroy()


def test_unbind_handler_keeps_other_bindings(root):
    first = root.bind("<Key>", lambda e: None, add="+")
    second = root.bind("<Key>", lambda e: None, add="+")

    unbind_handler(root, "<Key>", second)

    script = root.bind("<Key>")
    assert first in script
    assert second not in script


def test_unbind_last_handler_leaves_no_binding(root):
    only = root.bind("<Key>", lambda e: None, add="+")
    unbind_handler(root, "<Key>", only)
    assert only not in root.bind("<Key>")
