import customtkinter as ctk

from database.db_manager import StoreError
from services.security_service import PinSetupFlow, PinSetupStep, SecurityGate
from ui.components.pin_pad import PinPad

_PROMPTS = {
    PinSetupStep.ENTER: "Enter a 4-digit PIN",
    PinSetupStep.CONFIRM: "Confirm your PIN",
}


class PinSetupDialog(ctk.CTkToplevel):
    """Two-step PIN creation. .saved is True once a confirmed PIN was stored."""

    def __init__(self, master, gate: SecurityGate, **kwargs):
        super().__init__(master, **kwargs)
        self._flow = PinSetupFlow(gate)
        self.saved = False

        self.title("Set Up PIN")
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        self._prompt = ctk.CTkLabel(self, text="", font=ctk.CTkFont(size=15, weight="bold"))
        self._prompt.grid(row=0, column=0, padx=24, pady=(20, 8))

        self._pad = PinPad(self, on_digit=self._on_digit, on_delete=self._on_delete)
        self._pad.grid(row=1, column=0, padx=24, pady=4)

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var, text_color="#F44336",
        ).grid(row=2, column=0, padx=24, pady=(4, 0))

        ctk.CTkButton(
            self, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).grid(row=3, column=0, pady=(8, 16))

        self.bind("<Key>", self._pad.handle_key)
        self._render()

        self.transient(master)
        self.grab_set()
        self._center()
        self.focus_set()

    def _on_digit(self, digit: str):
        try:
            step = self._flow.press(digit)
        except StoreError as e:
            self._error_var.set(str(e))
            return
        if step == PinSetupStep.DONE:
            self.saved = True
            self.destroy()
            return
        self._render()

    def _on_delete(self):
        self._flow.delete()
        self._render()

    def _render(self):
        self._prompt.configure(text=_PROMPTS.get(self._flow.step, ""))
        self._pad.set_filled(len(self._flow.current))
        self._error_var.set(self._flow.error)

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w // 2}+{mh - h // 2}")
