import customtkinter as ctk
from models.recurring_template import RecurringTemplate
from services.recurring_service import RecurringService
from services.schedule_clock import describe_schedule
from ui.components.recurring_form import RecurringForm
from utils.constants import CATEGORY_NAMES
from utils.currency import format_currency
from utils.date_helpers import format_display_date, today


class RecurringTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = recurring_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format
        self._symbol = currency_symbol

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
            bar, text="Recurring Items",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Recurring", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        templates = self._svc.get_all()
        if not templates:
            ctk.CTkLabel(
                self._scroll,
                text="No recurring items yet. Click '+ Add Recurring' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        hdr = ctk.CTkFrame(self._scroll, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=0, column=0, sticky="ew", pady=(0, 2))
        for i, (col, w) in enumerate([
            ("Name", 170), ("Type", 70), ("Amount", 90), ("Category", 110),
            ("Schedule", 140), ("Started", 90), ("Next Due", 90),
            ("Status", 70), ("Actions", 100),
        ]):
            ctk.CTkLabel(
                hdr, text=col, width=w, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4)

        ref = today()
        for idx, template in enumerate(templates):
            self._add_row(idx + 1, template, ref)

    def _add_row(self, idx, template: RecurringTemplate, ref):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        next_due = self._svc.next_due_date(template, ref)
        status_text = "Active" if template.is_active else "Paused"
        status_color = "#4CAF50" if template.is_active else "gray60"

        data = [
            (template.label, 170),
            (template.type.title(), 70),
            (format_currency(template.amount, self._symbol), 90),
            (CATEGORY_NAMES.get(template.category_id, template.category_id), 110),
            (describe_schedule(template.schedule), 140),
            (format_display_date(template.schedule.start_date, self._date_format), 90),
            (format_display_date(next_due, self._date_format) or "—", 90),
        ]
        for i, (text, width) in enumerate(data):
            ctk.CTkLabel(row, text=text, width=width, anchor="w").grid(
                row=0, column=i, padx=4, pady=4
            )

        ctk.CTkLabel(
            row, text=status_text, width=70, anchor="w", text_color=status_color,
        ).grid(row=0, column=7, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=8, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=40, height=24,
            command=lambda t=template: self._open_edit(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Pause" if template.is_active else "Resume", width=56, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda t=template: self._toggle_active(t),
        ).pack(side="left")

    def _open_add(self):
        form = RecurringForm(self.winfo_toplevel(), self._svc, date_format=self._date_format)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("recurring")

    def _open_edit(self, template: RecurringTemplate):
        form = RecurringForm(
            self.winfo_toplevel(), self._svc,
            template=template, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("recurring")

    def _toggle_active(self, template: RecurringTemplate):
        self._svc.set_active(template.id, not template.is_active)
        self._notify_refresh("recurring")
