import customtkinter as ctk
from models.transaction import Transaction
from services.transaction_service import TransactionService
from ui.components.confirm_dialog import center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import DEFAULT_CATEGORIES
from utils.currency import parse_amount
from utils.date_helpers import today


class TransactionForm(ctk.CTkToplevel):
    """Add a one-off transaction or edit a real one."""

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        initial_type: str = "expense",
        transaction: Transaction | None = None,
        initial_date=None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._tx_svc = tx_service
        self._transaction = transaction
        self.saved = False

        if transaction:
            initial_type = transaction.type
        self.title(f"{'Edit' if transaction else 'Add'} {initial_type.title()}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        tx = transaction
        r = 0

        self._type_var = ctk.StringVar(value=initial_type)
        if not tx:
            self._label("Type:", r)
            type_frame = ctk.CTkFrame(self, fg_color="transparent")
            type_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
            for t in ("income", "expense"):
                ctk.CTkRadioButton(
                    type_frame, text=t.title(), variable=self._type_var, value=t,
                ).pack(side="left", padx=4)
            r += 1

        self._label("Description:", r)
        self._desc_var = ctk.StringVar(value=tx.description if tx else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{tx.amount:.2f}" if tx else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self, initial_date=tx.date if tx else (initial_date or today()),
            date_format=date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        if tx and tx.recurring_parent_id:
            # Scheduled occurrences keep their date.
            for child in self._date_picker.winfo_children():
                child.configure(state="disabled")
        r += 1

        self._label("Category:", r)
        cat_names = [c["name"] for c in DEFAULT_CATEGORIES]
        current_cat = cat_names[0]
        if tx:
            current_cat = next(
                (c["name"] for c in DEFAULT_CATEGORIES if c["id"] == tx.category_id),
                current_cat,
            )
        self._cat_var = ctk.StringVar(value=current_cat)
        ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var, width=200, state="readonly"
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._label("Account:", r)
        self._acct_var = ctk.StringVar(value=(tx.account_id or "") if tx else "")
        ctk.CTkEntry(self, textvariable=self._acct_var, width=200,
                     placeholder_text="(optional)").grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._verified_var = ctk.BooleanVar(value=tx.verified if tx else False)
        ctk.CTkCheckBox(self, text="Verified", variable=self._verified_var).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="w"
        )
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
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

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _on_save(self):
        cat_name = self._cat_var.get()
        category_id = next(
            (c["id"] for c in DEFAULT_CATEGORIES if c["name"] == cat_name), ""
        )
        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date.")
            return
        try:
            amount = parse_amount(self._amount_var.get())
            if self._transaction:
                self._tx_svc.update(
                    self._transaction.id, self._type_var.get(), amount,
                    self._date_picker.get(), category_id, self._desc_var.get(),
                    account_id=self._acct_var.get().strip() or None,
                    verified=self._verified_var.get(),
                )
            else:
                self._tx_svc.create(
                    self._type_var.get(), amount, self._date_picker.get(),
                    category_id, self._desc_var.get(),
                    account_id=self._acct_var.get().strip() or None,
                    verified=self._verified_var.get(),
                )
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
