import customtkinter as ctk
from models.transaction import Transaction
from services.month_close import MonthSummary
from services.month_service import MonthService
from services.transaction_service import TransactionService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.starting_balance_form import StartingBalanceForm
from ui.components.transaction_form import TransactionForm
from utils.constants import CATEGORY_NAMES, SEVERITY_COLORS
from utils.currency import format_currency, format_signed
from utils.date_helpers import (
    current_month_str, format_display_date, friendly_month, month_bounds,
    next_month, prev_month, today,
)

_MAX_RENDERED_ROWS = 150
_TYPE_COLORS = {"income": "#4CAF50", "expense": "#F44336"}


class MonthTab(ctk.CTkFrame):
    """One month of real transactions plus outstanding recurring forecasts."""

    def __init__(
        self,
        master,
        month_service: MonthService,
        tx_service: TransactionService,
        notify_refresh,
        show_banner,
        date_format: str = "MM/DD/YYYY",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._month_svc = month_service
        self._tx_svc = tx_service
        self._notify_refresh = notify_refresh
        self._show_banner = show_banner
        self._date_format = date_format
        self._symbol = currency_symbol

        self._month = current_month_str()
        self._month_var = ctk.StringVar(value=friendly_month(self._month))

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_nav_bar()
        self._build_header()
        self._build_register()
        self._build_summary_bar()
        self._load()

    def refresh(self):
        self._load()

    # ── Navigation ──────────────────────────────────────────────────────────
    def _build_nav_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).pack(
            side="left", padx=(8, 0), pady=6
        )
        ctk.CTkLabel(bar, textvariable=self._month_var, width=140).pack(side="left", padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).pack(
            side="left", padx=(0, 8)
        )

        self._add_buttons = []
        for label, type_ in (("+ Expense", "expense"), ("+ Income", "income")):
            btn = ctk.CTkButton(
                bar, text=label, width=88,
                command=lambda t=type_: self._open_add_form(t),
            )
            btn.pack(side="right", padx=(2, 8), pady=6)
            self._add_buttons.append(btn)

    def _prev_month(self):
        self._month = prev_month(self._month)
        self._load()

    def _next_month(self):
        self._month = next_month(self._month)
        self._load()

    # ── Register ────────────────────────────────────────────────────────────
    def _build_header(self):
        hdr = ctk.CTkFrame(self, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=1, column=0, sticky="ew", padx=8, pady=(4, 0))
        cols = [("✓", 30), ("Date", 85), ("Status", 80), ("Category", 120),
                ("Description", 200), ("Amount", 100), ("Actions", 100)]
        for i, (label, width) in enumerate(cols):
            ctk.CTkLabel(
                hdr, text=label, width=width, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4, sticky="w")

    def _build_register(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 4))
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()
        self._month_var.set(friendly_month(self._month))

        rows = self._month_svc.month_view(self._month)
        closed = self._month_svc.is_closed(self._month)
        self._update_summary(self._month_svc.summary(self._month, rows), closed)
        for btn in self._add_buttons:
            btn.configure(state="disabled" if closed else "normal")

        if not rows:
            ctk.CTkLabel(
                self._scroll, text="No transactions for this month.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=20)
            return

        for idx, tx in enumerate(rows[:_MAX_RENDERED_ROWS]):
            self._add_row(idx, tx, closed)

        if len(rows) > _MAX_RENDERED_ROWS:
            ctk.CTkLabel(
                self._scroll,
                text=f"Showing {_MAX_RENDERED_ROWS} of {len(rows)} transactions.",
                text_color="gray60",
                font=ctk.CTkFont(size=11),
            ).grid(row=_MAX_RENDERED_ROWS, column=0, pady=8)

    def _add_row(self, idx: int, tx: Transaction, closed: bool):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)
        dim = "gray60" if tx.provisional else None

        verified_var = ctk.BooleanVar(value=tx.verified)
        box = ctk.CTkCheckBox(
            row, text="", variable=verified_var, width=30,
            command=lambda t=tx, v=verified_var: self._toggle_verified(t, v),
        )
        box.grid(row=0, column=0, padx=(6, 0), pady=4)
        if tx.provisional or closed:
            box.configure(state="disabled")

        ctk.CTkLabel(
            row, text=format_display_date(tx.date, self._date_format), width=85, anchor="w",
            text_color=dim,
        ).grid(row=0, column=1, padx=4, pady=4)

        if tx.is_forecasted:
            status, color = "Forecast", "gray60"
        elif tx.provisional:
            status, color = "Due", SEVERITY_COLORS["warning"]
        elif tx.recurring_parent_id:
            status, color = "Recurring", SEVERITY_COLORS["info"]
        else:
            status, color = "", None
        ctk.CTkLabel(row, text=status, width=80, anchor="w", text_color=color).grid(
            row=0, column=2, padx=4
        )

        ctk.CTkLabel(
            row, text=CATEGORY_NAMES.get(tx.category_id, tx.category_id), width=120,
            anchor="w", text_color=dim,
        ).grid(row=0, column=3, padx=4)
        ctk.CTkLabel(
            row, text=tx.description or "—", width=200, anchor="w", text_color=dim,
        ).grid(row=0, column=4, padx=4)

        sign = "+" if tx.type == "income" else "-"
        ctk.CTkLabel(
            row, text=f"{sign}{format_currency(tx.amount, self._symbol)}", width=100,
            anchor="e", text_color=dim or _TYPE_COLORS[tx.type],
        ).grid(row=0, column=5, padx=4)

        if tx.provisional or closed:
            return
        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=6, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda t=tx: self._open_edit_form(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Del", width=38, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda t=tx: self._delete_tx(t),
        ).pack(side="left")

    # ── Summary / close ─────────────────────────────────────────────────────
    def _build_summary_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=3, column=0, sticky="ew", padx=8, pady=(0, 8))
        self._totals_label = ctk.CTkLabel(bar, text="", anchor="w")
        self._totals_label.pack(side="left", padx=12, pady=8)
        self._close_btn = ctk.CTkButton(bar, text="Close Month", width=110, command=self._close_month)
        self._close_btn.pack(side="right", padx=8, pady=6)
        self._balance_btn = ctk.CTkButton(
            bar, text="Starting Balance", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._open_balance_form,
        )
        self._balance_btn.pack(side="right", padx=(8, 0), pady=6)
        self._status_label = ctk.CTkLabel(bar, text="", anchor="e")
        self._status_label.pack(side="right", padx=8)

    def _update_summary(self, summary: MonthSummary, closed: bool):
        s = self._symbol
        self._totals_label.configure(text=(
            f"Start {format_currency(summary.starting_balance, s)}   "
            f"Income {format_currency(summary.income, s)}   "
            f"Expenses {format_currency(summary.expenses, s)}   "
            f"Net {format_signed(summary.net, s)}   "
            f"Ending balance {format_currency(summary.ending_balance, s)}"
        ))
        self._balance_btn.configure(state="disabled" if closed else "normal")
        self._close_btn.configure(text="Reopen Month" if closed else "Close Month")
        if closed:
            self._status_label.configure(text="Month closed", text_color=SEVERITY_COLORS["success"])
            self._close_btn.configure(state="normal")
        elif summary.total_count == 0:
            self._status_label.configure(text="Add some transactions first", text_color="gray60")
            self._close_btn.configure(state="disabled")
        elif summary.all_verified:
            self._status_label.configure(text="Ready to close", text_color=SEVERITY_COLORS["success"])
            self._close_btn.configure(state="normal")
        else:
            self._status_label.configure(
                text=f"{summary.unverified_count} of {summary.total_count} need verification",
                text_color=SEVERITY_COLORS["warning"],
            )
            self._close_btn.configure(state="disabled")

    def _close_month(self):
        if self._month_svc.is_closed(self._month):
            self._month_svc.reopen_month(self._month)
            self._notify_refresh("transaction")
            return
        dlg = ConfirmDialog(
            self.winfo_toplevel(), "Close Month",
            f"Close {friendly_month(self._month)}? Its transactions become read-only.",
            confirm_text="Close", destructive=False,
        )
        if not dlg.result:
            return
        try:
            self._month_svc.close_month(self._month)
        except ValueError as e:
            self._show_banner(str(e), "warning")
            return
        self._notify_refresh("transaction")

    # ── Actions ─────────────────────────────────────────────────────────────
    def _open_balance_form(self):
        form = StartingBalanceForm(self.winfo_toplevel(), self._month_svc, self._month)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _toggle_verified(self, tx: Transaction, var: ctk.BooleanVar):
        self._tx_svc.set_verified(tx.id, var.get())
        self._notify_refresh("transaction")

    def _open_add_form(self, type_: str):
        start, end = month_bounds(self._month)
        ref = today()
        form = TransactionForm(
            self.winfo_toplevel(), self._tx_svc,
            initial_type=type_,
            initial_date=ref if start <= ref <= end else start,
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _open_edit_form(self, tx: Transaction):
        form = TransactionForm(
            self.winfo_toplevel(), self._tx_svc,
            transaction=tx, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _delete_tx(self, tx: Transaction):
        message = f"Delete this {tx.type} of {format_currency(tx.amount, self._symbol)}?"
        if tx.recurring_parent_id:
            message += " The recurring item will not recreate it."
        dlg = ConfirmDialog(self.winfo_toplevel(), "Delete Transaction", message)
        if dlg.result:
            self._tx_svc.delete(tx.id)
            self._notify_refresh("transaction")
