import asyncio
import logging
import threading

import customtkinter as ctk

from services.security_service import AuthFailure, AuthResult, SecurityGate
from ui.components.pin_pad import PinPad
from utils.constants import PIN_LENGTH
from utils.tk_helpers import unbind_handler

logger = logging.getLogger(__name__)


class LockScreen(ctk.CTkFrame):
    """Full-window overlay shown while the gate is locked.

    Offers the PIN keypad when PIN unlock is configured and a biometric
    button when biometric unlock is enabled. Unlocking is driven entirely
    by the gate; the host window hides this overlay from its gate listener.
    """

    def __init__(self, master, gate: SecurityGate, **kwargs):
        super().__init__(master, corner_radius=0, fg_color=("gray95", "gray10"), **kwargs)
        self._gate = gate
        self._entered = ""
        self._biometric_pending = False
        self._key_binding: str | None = None

        body = ctk.CTkFrame(self, fg_color="transparent")
        body.place(relx=0.5, rely=0.5, anchor="center")

        ctk.CTkLabel(body, text="🔒", font=ctk.CTkFont(size=48)).pack(pady=(0, 4))
        ctk.CTkLabel(body, text="App Locked", font=ctk.CTkFont(size=22, weight="bold")).pack()
        self._hint = ctk.CTkLabel(body, text="", text_color="gray60")
        self._hint.pack(pady=(4, 16))

        # Fixed slots keep the keypad above the button when either is toggled
        pad_slot = ctk.CTkFrame(body, fg_color="transparent")
        pad_slot.pack()
        bio_slot = ctk.CTkFrame(body, fg_color="transparent")
        bio_slot.pack()

        self._pad = PinPad(pad_slot, on_digit=self._on_digit, on_delete=self._on_delete)
        self._pad.pack()

        self._bio_btn = ctk.CTkButton(
            bio_slot, text="Unlock with Biometrics", width=220,
            command=self.start_biometric,
        )
        self._bio_btn.pack(pady=(16, 0))

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(body, textvariable=self._error_var, text_color="#F44336", wraplength=320).pack(
            pady=(8, 0)
        )

    # ── Visibility ───────────────────────────────────────────────────────────
    def show(self):
        self._entered = ""
        self._error_var.set("")
        self._configure_methods()
        self.place(relx=0, rely=0, relwidth=1, relheight=1)
        self.lift()
        if self._key_binding is None:
            self._key_binding = self.winfo_toplevel().bind("<Key>", self._on_key, add="+")
        if self._gate.use_biometric and self._gate.biometric_available:
            self.after(300, self.start_biometric)

    def hide(self):
        self.place_forget()
        if self._key_binding is not None:
            # Drop only our handler; other <Key> bindings on the window stay
            unbind_handler(self.winfo_toplevel(), "<Key>", self._key_binding)
            self._key_binding = None

    def _configure_methods(self):
        pin_ready = self._gate.use_pin and self._gate.has_passcode
        if pin_ready:
            self._pad.pack()
        else:
            self._pad.pack_forget()
        if self._gate.use_biometric:
            self._bio_btn.pack(pady=(16, 0))
        else:
            self._bio_btn.pack_forget()

        if pin_ready and self._gate.use_biometric:
            self._hint.configure(text="Enter your PIN or use biometrics")
        elif pin_ready:
            self._hint.configure(text="Enter your PIN")
        else:
            self._hint.configure(text="Authenticate to continue")
        self._pad.set_filled(0)

    # ── PIN ──────────────────────────────────────────────────────────────────
    def _on_key(self, event):
        if self.winfo_ismapped() and self._gate.use_pin:
            self._pad.handle_key(event)

    def _on_digit(self, digit: str):
        if len(self._entered) >= PIN_LENGTH:
            return
        self._error_var.set("")
        self._entered += digit
        self._pad.set_filled(len(self._entered))
        if len(self._entered) == PIN_LENGTH:
            candidate, self._entered = self._entered, ""
            result = self._gate.submit_pin(candidate)
            self._pad.set_filled(0)
            if not result.success:
                self._error_var.set(result.message)

    def _on_delete(self):
        self._entered = self._entered[:-1]
        self._pad.set_filled(len(self._entered))

    # ── Biometric ────────────────────────────────────────────────────────────
    def start_biometric(self):
        """Run the biometric prompt off the Tk thread and report back via after()."""
        if self._biometric_pending or not self._gate.is_locked:
            return
        self._biometric_pending = True
        self._bio_btn.configure(state="disabled")
        self._error_var.set("")
        threading.Thread(target=self._run_biometric, daemon=True).start()

    def _run_biometric(self):
        result = asyncio.run(self._gate.submit_biometric())
        self.after(0, lambda: self._on_biometric_result(result))

    def _on_biometric_result(self, result: AuthResult):
        self._biometric_pending = False
        self._bio_btn.configure(state="normal")
        if result.success or result.reason == AuthFailure.DISABLED:
            return
        logger.debug("Biometric unlock did not succeed: %s", result.reason)
        self._error_var.set(result.message)
