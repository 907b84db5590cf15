import customtkinter as ctk
from services.month_service import MonthService
from ui.components.confirm_dialog import center_on_master
from utils.currency import parse_amount
from utils.date_helpers import friendly_month


class StartingBalanceForm(ctk.CTkToplevel):
    """Set the balance a month opens with."""

    def __init__(self, master, month_service: MonthService, month: str, **kwargs):
        super().__init__(master, **kwargs)
        self._month_svc = month_service
        self._month = month
        self.saved = False

        self.title("Starting Balance")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            self, text=friendly_month(month), font=ctk.CTkFont(size=14, weight="bold"),
        ).grid(row=0, column=0, columnspan=2, padx=16, pady=(16, 4), sticky="w")

        ctk.CTkLabel(self, text="Balance:").grid(row=1, column=0, padx=(16, 8), pady=4, sticky="e")
        current = month_service.get_settings(month).starting_balance
        self._amount_var = ctk.StringVar(value=f"{current:.2f}")
        entry = ctk.CTkEntry(self, textvariable=self._amount_var, width=160)
        entry.grid(row=1, column=1, padx=(0, 16), pady=4, sticky="ew")
        entry.bind("<Return>", lambda _e: self._on_save())

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=240, anchor="w",
        ).grid(row=2, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=3, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)
        entry.focus_set()

    def _on_save(self):
        try:
            amount = parse_amount(self._amount_var.get())
            self._month_svc.set_starting_balance(self._month, amount)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
