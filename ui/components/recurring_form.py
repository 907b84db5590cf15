import customtkinter as ctk
from dataclasses import replace
from models.errors import InvalidSchedule
from models.recurring_template import RecurringTemplate
from models.schedule import Schedule
from services.recurring_service import RecurringService
from ui.components.confirm_dialog import ConfirmDialog, center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import DEFAULT_CATEGORIES, SCHEDULE_LABELS, SCHEDULE_TYPES
from utils.currency import parse_amount
from utils.date_helpers import today

_SCHEDULE_BY_LABEL = {SCHEDULE_LABELS[t]: t for t in SCHEDULE_TYPES}
_DAY_CHOICES = ["Same as start"] + [str(i) for i in range(1, 32)]


class RecurringForm(ctk.CTkToplevel):
    """Add or edit a recurring template."""

    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        template: RecurringTemplate | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = recurring_service
        self._template = template
        self._date_format = date_format
        self.saved = False

        self.title("Edit Recurring Item" if template else "New Recurring Item")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        schedule = template.schedule if template else None
        r = 0

        self._add_label("Name:", r)
        self._name_var = ctk.StringVar(value=template.name if template else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=220,
                     placeholder_text="(optional)").grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Type:", r)
        self._type_var = ctk.StringVar(value=template.type if template else "expense")
        type_frame = ctk.CTkFrame(self, fg_color="transparent")
        type_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for t in ("income", "expense"):
            ctk.CTkRadioButton(
                type_frame, text=t.title(), variable=self._type_var, value=t,
            ).pack(side="left", padx=4)
        r += 1

        self._add_label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{template.amount:.2f}" if template else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Description:", r)
        self._desc_var = ctk.StringVar(value=template.description if template else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Category:", r)
        cat_names = [c["name"] for c in DEFAULT_CATEGORIES]
        current_cat = cat_names[0]
        if template:
            current_cat = next(
                (c["name"] for c in DEFAULT_CATEGORIES if c["id"] == template.category_id),
                current_cat,
            )
        self._cat_var = ctk.StringVar(value=current_cat)
        ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var, width=220, state="readonly"
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Account:", r)
        self._acct_var = ctk.StringVar(value=(template.account_id or "") if template else "")
        ctk.CTkEntry(self, textvariable=self._acct_var, width=220,
                     placeholder_text="(optional)").grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Repeats:", r)
        self._freq_var = ctk.StringVar(
            value=SCHEDULE_LABELS[schedule.type] if schedule else SCHEDULE_LABELS["monthly"]
        )
        ctk.CTkComboBox(
            self, values=list(_SCHEDULE_BY_LABEL), variable=self._freq_var,
            width=220, state="readonly", command=lambda _: self._refresh_step_fields(),
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._step_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._step_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=2, sticky="ew")
        r += 1
        self._dom_var = ctk.StringVar(
            value=str(schedule.day_of_month) if schedule and schedule.day_of_month else _DAY_CHOICES[0]
        )
        self._days_var = ctk.StringVar(
            value=str(schedule.custom_days) if schedule and schedule.custom_days else "30"
        )
        self._refresh_step_fields()

        self._add_label("Start Date:", r)
        self._start_picker = DatePickerWidget(
            self, initial_date=schedule.start_date if schedule else today(),
            date_format=date_format,
        )
        self._start_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._add_label("End Date:", r)
        self._end_picker = DatePickerWidget(
            self, initial_date=schedule.end_date if schedule else None,
            date_format=date_format, allow_empty=True,
        )
        self._end_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
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
        if template:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _refresh_step_fields(self):
        for w in self._step_frame.winfo_children():
            w.destroy()

        kind = _SCHEDULE_BY_LABEL[self._freq_var.get()]
        if kind == "monthly":
            ctk.CTkLabel(self._step_frame, text="Day of Month:").grid(
                row=0, column=0, padx=(0, 8), sticky="e"
            )
            ctk.CTkComboBox(
                self._step_frame, values=_DAY_CHOICES,
                variable=self._dom_var, width=130, state="readonly",
            ).grid(row=0, column=1, sticky="w")
        elif kind == "custom":
            ctk.CTkLabel(self._step_frame, text="Every N days:").grid(
                row=0, column=0, padx=(0, 8), sticky="e"
            )
            ctk.CTkEntry(
                self._step_frame, textvariable=self._days_var, width=60,
            ).grid(row=0, column=1, sticky="w")

    def _build_schedule(self) -> Schedule:
        kind = _SCHEDULE_BY_LABEL[self._freq_var.get()]
        if not self._start_picker.is_valid():
            raise ValueError("Invalid start date.")
        if not self._end_picker.is_valid():
            raise ValueError("Invalid end date.")

        day_of_month = None
        custom_days = None
        if kind == "monthly" and self._dom_var.get() != _DAY_CHOICES[0]:
            day_of_month = int(self._dom_var.get())
        elif kind == "custom":
            try:
                custom_days = int(self._days_var.get())
            except ValueError:
                raise InvalidSchedule("Number of days must be a whole number.") from None

        return Schedule(
            type=kind,
            start_date=self._start_picker.get(),
            day_of_month=day_of_month,
            custom_days=custom_days,
            end_date=self._end_picker.get(),
        )

    def _on_save(self):
        cat_name = self._cat_var.get()
        category_id = next(
            (c["id"] for c in DEFAULT_CATEGORIES if c["name"] == cat_name), ""
        )
        try:
            amount = parse_amount(self._amount_var.get())
            schedule = self._build_schedule()
            if self._template:
                self._svc.update(replace(
                    self._template,
                    name=self._name_var.get().strip(),
                    type=self._type_var.get(),
                    amount=amount,
                    category_id=category_id,
                    description=self._desc_var.get(),
                    account_id=self._acct_var.get().strip() or None,
                    schedule=schedule,
                ))
            else:
                self._svc.create(
                    self._type_var.get(), amount, category_id,
                    self._desc_var.get(), schedule,
                    account_id=self._acct_var.get().strip() or None,
                    name=self._name_var.get(),
                )
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        dlg = ConfirmDialog(
            self, "Delete Recurring Item",
            f"Delete '{self._template.label}'? Transactions it already created are kept.",
            confirm_text="Delete",
        )
        if not dlg.result:
            return
        self._svc.delete(self._template.id)
        self.saved = True
        self.destroy()
