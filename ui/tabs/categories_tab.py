import customtkinter as ctk

from database.db_manager import StoreError
from models.category import Category, IncomeCategory
from services.category_service import CategoryService
from ui.components.category_form import CategoryForm
from ui.components.confirm_dialog import ConfirmDialog
from utils.emoji_helpers import normalize_hex, tk_color


class CategoriesTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        category_service: CategoryService,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = category_service
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(
            bar, text="Expense Categories",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)

        ctk.CTkButton(bar, text="+ Add Category", command=self._open_add).pack(
            side="left", padx=4, pady=6
        )

        self._status_label = ctk.CTkLabel(bar, text="", text_color="#F44336")
        self._status_label.pack(side="right", padx=12)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        categories = self._svc.get_expense_categories()
        r = 0
        if not categories:
            ctk.CTkLabel(
                self._scroll, text="No categories yet. Add one to get started.",
                text_color="gray60",
            ).grid(row=r, column=0, pady=40)
            r += 1
        for cat in categories:
            self._add_row(r, cat)
            r += 1

        # Income categories are fixed; list them read-only for reference
        ctk.CTkLabel(
            self._scroll, text="Income Categories (built in)",
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=r, column=0, sticky="w", padx=8, pady=(16, 4))
        r += 1
        for member in IncomeCategory:
            ctk.CTkLabel(
                self._scroll, text=f"{member.emoji}  {member.label}",
                text_color="gray60", anchor="w",
            ).grid(row=r, column=0, sticky="w", padx=16, pady=1)
            r += 1

    def _add_row(self, idx: int, cat: Category):
        row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=4, pady=3)
        row.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            row, text=self._svc.display_emoji(cat), width=36,
            font=ctk.CTkFont(size=20),
        ).grid(row=0, column=0, padx=(10, 0), pady=8)

        ctk.CTkLabel(
            row, text=cat.name, font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=1, padx=8, sticky="w")

        color = normalize_hex(cat.color_hex)
        if color:
            ctk.CTkLabel(
                row, text="", width=20, height=20, corner_radius=10,
                fg_color=tk_color(color),
            ).grid(row=0, column=2, padx=4)

        btn_frame = ctk.CTkFrame(row, fg_color="transparent")
        btn_frame.grid(row=0, column=3, padx=(4, 10), pady=6)

        ctk.CTkButton(
            btn_frame, text="Edit", width=60, height=26,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda c=cat: self._open_edit(c),
        ).pack(side="left", padx=(0, 4))

        ctk.CTkButton(
            btn_frame, text="Delete", width=65, height=26,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda c=cat: self._on_delete(c),
        ).pack(side="left")

    def _open_add(self):
        form = CategoryForm(self.winfo_toplevel(), self._svc)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("category")

    def _open_edit(self, cat: Category):
        form = CategoryForm(self.winfo_toplevel(), self._svc, category=cat)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("category")

    def _on_delete(self, cat: Category):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Category",
            message=f"Delete '{cat.name}'? Existing records keep their category name.",
        )
        if not dlg.result:
            return
        try:
            self._svc.delete(cat.id)
        except (ValueError, StoreError) as e:
            self._status_label.configure(text=str(e))
            return
        self._status_label.configure(text="")
        self._notify_refresh("category")
