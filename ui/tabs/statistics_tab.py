from tkinter import messagebox

import customtkinter as ctk
import tkinter as tk
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from database.db_manager import StoreError
from models.filter_state import FilterState
from models.settings import AppSettings
from models.statistics import Statistics
from services.report_service import ReportService
from utils.constants import EXPENSE_COLOR, INCOME_COLOR, NET_NEGATIVE_COLOR, NET_POSITIVE_COLOR
from utils.currency import format_currency


class StatisticsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        report_service: ReportService,
        settings: AppSettings,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._report_svc = report_service
        self._settings = settings
        self._kind_var = ctk.StringVar(value="Expenses")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._build_summary()
        self._build_charts()
        self._load()

    def refresh(self):
        self._load()

    @property
    def _kind(self) -> str:
        return "income" if self._kind_var.get() == "Income" else "expense"

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(bar, text="Show:").pack(side="left", padx=(12, 4), pady=8)
        ctk.CTkSegmentedButton(
            bar, values=["Expenses", "Income"], variable=self._kind_var,
            command=lambda _: self._load(),
        ).pack(side="left", padx=(0, 12))

    def _build_summary(self):
        self._summary_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._summary_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=10)
        self._summary_frame.grid_columnconfigure((0, 1, 2), weight=1)

    def _build_charts(self):
        charts = ctk.CTkFrame(self, fg_color="transparent")
        charts.grid(row=2, column=0, sticky="nsew", padx=16, pady=(0, 12))
        charts.grid_columnconfigure(0, weight=3)
        charts.grid_columnconfigure(1, weight=2)
        charts.grid_rowconfigure(0, weight=1)

        bar_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        bar_outer.grid(row=0, column=0, sticky="nsew", padx=(0, 8))
        self._bar_title = ctk.CTkLabel(bar_outer, text="", font=ctk.CTkFont(size=13, weight="bold"))
        self._bar_title.pack(pady=(10, 0))
        self._bar_fig = Figure(figsize=(5, 3), dpi=80, tight_layout=True)
        self._bar_ax = self._bar_fig.add_subplot(111)
        self._bar_mpl = FigureCanvasTkAgg(self._bar_fig, master=bar_outer)
        self._bar_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))

        pie_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        pie_outer.grid(row=0, column=1, sticky="nsew")
        ctk.CTkLabel(
            pie_outer, text="Category Breakdown",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(pady=(10, 0))
        self._pie_fig = Figure(figsize=(3, 3), dpi=80, tight_layout=True)
        self._pie_ax = self._pie_fig.add_subplot(111)
        self._pie_mpl = FigureCanvasTkAgg(self._pie_fig, master=pie_outer)
        self._pie_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))
        self._legend_frame = ctk.CTkFrame(pie_outer, fg_color="transparent")
        self._legend_frame.pack(fill="x", padx=8, pady=(0, 8))

    def _style_ax(self, ax, fig):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"
        fig.patch.set_facecolor(bg)
        ax.set_facecolor(bg)
        ax.tick_params(colors=fg, labelsize=8)
        for spine in ax.spines.values():
            spine.set_edgecolor(fg)

    def _load(self):
        try:
            summary = self._report_svc.get_summary()
            stats = self._report_svc.get_statistics(self._kind, FilterState())
        except StoreError as e:
            messagebox.showerror("Error", str(e), parent=self.winfo_toplevel())
            return

        symbol = self._settings.currency_symbol
        for w in self._summary_frame.winfo_children():
            w.destroy()
        net_color = NET_POSITIVE_COLOR if summary["net"] >= 0 else NET_NEGATIVE_COLOR
        for i, (label, value, color) in enumerate([
            ("Total Income", summary["income"], INCOME_COLOR),
            ("Total Expenses", summary["expense"], EXPENSE_COLOR),
            ("Net", summary["net"], net_color),
        ]):
            card = ctk.CTkFrame(self._summary_frame, fg_color=("gray90", "gray20"), corner_radius=10)
            card.grid(row=0, column=i, padx=6, sticky="ew")
            ctk.CTkLabel(card, text=label, text_color="gray60").pack(pady=(10, 0), padx=16)
            ctk.CTkLabel(
                card, text=format_currency(value, symbol),
                font=ctk.CTkFont(size=18, weight="bold"),
                text_color=color,
            ).pack(pady=(4, 10), padx=16)

        self._bar_title.configure(text=f"{self._kind_var.get()} by Period")
        self.after(50, lambda s=stats: self._draw_bar_chart(s))
        self.after(50, lambda s=stats: self._draw_pie_chart(s))

        for w in self._legend_frame.winfo_children():
            w.destroy()
        for category, total in stats.category_breakdown.items():
            row = ctk.CTkFrame(self._legend_frame, fg_color="transparent")
            row.pack(fill="x", pady=1)
            tk.Label(row, bg=category.tint, width=2).pack(side="left", padx=(0, 4))
            share = stats.breakdown_share(category)
            ctk.CTkLabel(
                row, text=f"{category.emoji} {category.label}: {format_currency(total, symbol)} ({share:.0%})",
                anchor="w", font=ctk.CTkFont(size=11),
            ).pack(side="left")

    def _draw_bar_chart(self, stats: Statistics):
        ax = self._bar_ax
        ax.clear()
        self._style_ax(ax, self._bar_fig)

        labels = ["Today", "This Week", "This Month"]
        values = [stats.total_today, stats.total_this_week, stats.total_this_month]
        color = INCOME_COLOR if self._kind == "income" else EXPENSE_COLOR
        ax.bar(labels, values, 0.5, color=color)
        ax.yaxis.set_major_formatter(
            lambda v, _: f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"
        )
        self._bar_mpl.draw_idle()

    def _draw_pie_chart(self, stats: Statistics):
        ax = self._pie_ax
        ax.clear()
        self._style_ax(ax, self._pie_fig)

        slices = [(c, v) for c, v in stats.category_breakdown.items() if v > 0]
        if not slices:
            ax.text(0.5, 0.5, "No data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._pie_mpl.draw_idle()
            return

        ax.pie(
            [v for _, v in slices],
            colors=[c.tint for c, _ in slices],
            wedgeprops={"edgecolor": "#444444", "linewidth": 0.5},
            startangle=90,
        )
        ax.set_aspect("equal")
        self._pie_mpl.draw_idle()
