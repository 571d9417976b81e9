from typing import Callable

import customtkinter as ctk

from utils.constants import PIN_LENGTH

_KEYS = [
    ("1", "2", "3"),
    ("4", "5", "6"),
    ("7", "8", "9"),
    ("", "0", "⌫"),
]


class PinPad(ctk.CTkFrame):
    """Row of PIN dots above a 3×4 digit keypad.

    on_digit(d) fires for each digit key, on_delete() for backspace; the
    owner calls set_filled() to redraw the dots.
    """

    def __init__(
        self,
        master,
        on_digit: Callable[[str], None],
        on_delete: Callable[[], None],
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._on_digit = on_digit
        self._on_delete = on_delete

        dots = ctk.CTkFrame(self, fg_color="transparent")
        dots.grid(row=0, column=0, columnspan=3, pady=(0, 16))
        self._dots = [
            ctk.CTkLabel(dots, text="○", font=ctk.CTkFont(size=22), width=28)
            for _ in range(PIN_LENGTH)
        ]
        for dot in self._dots:
            dot.pack(side="left", padx=4)

        for r, row in enumerate(_KEYS, start=1):
            for c, key in enumerate(row):
                if not key:
                    continue
                command = self._on_delete if key == "⌫" else (lambda k=key: self._on_digit(k))
                ctk.CTkButton(
                    self, text=key, width=64, height=48,
                    font=ctk.CTkFont(size=20),
                    fg_color=("gray80", "gray25"), hover_color=("gray70", "gray30"),
                    text_color=("gray10", "gray90"),
                    command=command,
                ).grid(row=r, column=c, padx=6, pady=6)

    def set_filled(self, count: int):
        for idx, dot in enumerate(self._dots):
            dot.configure(text="●" if idx < count else "○")

    def handle_key(self, event) -> bool:
        """Route a keyboard event to the pad; True when it was consumed."""
        if event.char and event.char.isdigit():
            self._on_digit(event.char)
            return True
        if event.keysym == "BackSpace":
            self._on_delete()
            return True
        return False
