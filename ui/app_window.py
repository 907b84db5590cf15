import customtkinter as ctk
from models.transaction import Transaction
from services.month_service import MonthService
from services.recurring_service import RecurringService
from services.transaction_service import TransactionService
from ui.components.alert_banner import AlertBanner
from ui.tabs.month_tab import MonthTab
from ui.tabs.recurring_tab import RecurringTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT


_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"month"},
    "recurring":   {"month", "recurring"},
    "full":        {"month", "recurring"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        month_service: MonthService,
        tx_service: TransactionService,
        recurring_service: RecurringService,
        startup_transactions: list[Transaction] | None = None,
        date_format: str = "MM/DD/YYYY",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._month_svc = month_service
        self._tx_svc = tx_service
        self._recurring_svc = recurring_service
        self._startup_transactions = startup_transactions or []
        self._date_format = date_format
        self._currency_symbol = currency_symbol

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_banner_area()
        self._build_tabs()

        if self._startup_transactions:
            count = len(self._startup_transactions)
            self.after(300, lambda: self.show_banner(
                f"{count} recurring transaction{'s were' if count != 1 else ' was'} "
                "added since you last opened the app.",
                "info",
            ))

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Month", "Recurring"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._month_tab = MonthTab(
            self._tabview.tab("Month"),
            month_service=self._month_svc,
            tx_service=self._tx_svc,
            notify_refresh=self.notify_tabs_refresh,
            show_banner=self.show_banner,
            date_format=self._date_format,
            currency_symbol=self._currency_symbol,
        )
        self._month_tab.grid(row=0, column=0, sticky="nsew")

        self._recurring_tab = RecurringTab(
            self._tabview.tab("Recurring"),
            recurring_service=self._recurring_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=self._date_format,
            currency_symbol=self._currency_symbol,
        )
        self._recurring_tab.grid(row=0, column=0, sticky="nsew")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "month"     in tabs: self._month_tab.refresh()
        if "recurring" in tabs: self._recurring_tab.refresh()

    # ── Banners ──────────────────────────────────────────────────────────────
    def show_banner(self, message: str, severity: str = "info"):
        for w in self._banner_frame.winfo_children():
            w.destroy()
        AlertBanner(
            self._banner_frame,
            message=message,
            severity=severity,
            action_text="View" if severity == "info" else None,
            action_cmd=lambda: self._tabview.set("Month"),
        ).pack(fill="x", pady=2)
