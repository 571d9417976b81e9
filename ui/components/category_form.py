import customtkinter as ctk
from tkinter import colorchooser

from database.db_manager import StoreError
from models.category import Category
from services.category_service import CategoryService
from utils.constants import EMOJI_CHOICES
from utils.emoji_helpers import normalize_hex, tk_color

_EMOJI_COLUMNS = 8


class CategoryForm(ctk.CTkToplevel):
    """Add or edit an expense category: name, one emoji, optional color."""

    def __init__(
        self,
        master,
        category_service: CategoryService,
        category: Category | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = category_service
        self._category = category
        self.saved = False

        self.title("Edit Category" if category else "New Category")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0

        # Name
        ctk.CTkLabel(self, text="Name:").grid(row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e")
        self._name_var = ctk.StringVar(value=category.name if category else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )
        r += 1

        # Emoji
        ctk.CTkLabel(self, text="Emoji:").grid(row=r, column=0, padx=(16, 8), pady=4, sticky="e")
        self._emoji_var = ctk.StringVar(value=category.emoji if category else "")
        emoji_entry = ctk.CTkEntry(self, textvariable=self._emoji_var, width=60)
        emoji_entry.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        emoji_entry.bind("<FocusOut>", self._on_emoji_changed)
        r += 1

        grid = ctk.CTkFrame(self, fg_color="transparent")
        grid.grid(row=r, column=1, padx=(0, 16), pady=(0, 4), sticky="w")
        for idx, emoji in enumerate(EMOJI_CHOICES):
            ctk.CTkButton(
                grid, text=emoji, width=30, height=30,
                fg_color="transparent", hover_color=("gray80", "gray25"),
                text_color=("gray10", "gray90"),
                command=lambda e=emoji: self._choose_emoji(e),
            ).grid(row=idx // _EMOJI_COLUMNS, column=idx % _EMOJI_COLUMNS, padx=1, pady=1)
        r += 1

        # Color
        ctk.CTkLabel(self, text="Color:").grid(row=r, column=0, padx=(16, 8), pady=4, sticky="e")
        color_row = ctk.CTkFrame(self, fg_color="transparent")
        color_row.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")

        self._color_var = ctk.StringVar(value=(category.color_hex or "") if category else "")
        self._color_entry = ctk.CTkEntry(
            color_row, textvariable=self._color_var, width=100, placeholder_text="none"
        )
        self._color_entry.pack(side="left")
        self._color_entry.bind("<FocusOut>", self._sync_swatch)

        self._swatch = ctk.CTkLabel(color_row, text="", width=32, height=24, corner_radius=4)
        self._swatch.pack(side="left", padx=(8, 0))

        ctk.CTkButton(
            color_row, text="Pick", width=60,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._pick_color,
        ).pack(side="left", padx=(8, 0))
        ctk.CTkButton(
            color_row, text="Clear", width=60,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._clear_color,
        ).pack(side="left", padx=(4, 0))
        r += 1

        ctk.CTkLabel(
            self, text="Color tints this category in dark mode only.",
            text_color="gray60", anchor="w", font=ctk.CTkFont(size=11),
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        # Error
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        # Buttons
        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        if category:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self._sync_swatch()
        self.transient(master)
        self.grab_set()
        self._center()

    def _choose_emoji(self, emoji: str):
        self._emoji_var.set(emoji)
        self._on_emoji_changed()

    def _on_emoji_changed(self, _event=None):
        # Suggest a color for the glyph unless the user already set one
        if self._color_var.get().strip():
            return
        suggested = self._svc.suggest_color(self._emoji_var.get())
        if suggested:
            self._color_var.set(suggested)
            self._sync_swatch()

    def _pick_color(self):
        current = normalize_hex(self._color_var.get())
        result = colorchooser.askcolor(
            color=tk_color(current) if current else None, parent=self, title="Pick Category Color"
        )
        if result and result[1]:
            self._color_var.set(result[1].upper())
            self._sync_swatch()

    def _clear_color(self):
        self._color_var.set("")
        self._sync_swatch()

    def _sync_swatch(self, _event=None):
        color = normalize_hex(self._color_var.get())
        self._swatch.configure(fg_color=tk_color(color) if color else "transparent")

    def _on_save(self):
        name = self._name_var.get()
        emoji = self._emoji_var.get()
        color = self._color_var.get()
        try:
            if self._category:
                self._svc.update(self._category.id, name, emoji, color)
            else:
                self._svc.create(name, emoji, color)
        except (ValueError, StoreError) as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        try:
            self._svc.delete(self._category.id)
        except (ValueError, StoreError) as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w // 2}+{mh - h // 2}")
