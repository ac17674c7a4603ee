from __future__ import annotations

from datetime import datetime, time

import xlsxwriter

from savings_ledger.schemas.bank_data import User
from savings_ledger.services.dates import parse_date
from savings_ledger.services.ledger import Series


def build_account_report(user: User, series: Series, current_rate: float, out_file):
    wb = xlsxwriter.Workbook(out_file, {"in_memory": True})
    base_font = "Calibri"

    # ----------------------------
    # Formats
    # ----------------------------
    meta_label = wb.add_format({"bold": True, "font_name": base_font, "font_size": 11, "font_color": "#334155"})
    meta_value = wb.add_format({"font_name": base_font, "font_size": 11, "font_color": "#0f172a"})
    subtle = wb.add_format({"font_name": base_font, "font_size": 10, "font_color": "#64748b"})

    header = wb.add_format(
        {
            "bold": True,
            "font_name": base_font,
            "font_size": 11,
            "bg_color": "#F1F5F9",
            "border": 1,
            "align": "center",
            "valign": "vcenter",
        }
    )

    date_fmt = wb.add_format({"font_name": base_font, "font_size": 11, "num_format": "yyyy-mm-dd", "border": 1})
    money2 = wb.add_format(
        {"font_name": base_font, "font_size": 11, "num_format": "#,##0.00", "border": 1, "align": "right"}
    )
    rate4 = wb.add_format(
        {"font_name": base_font, "font_size": 11, "num_format": "0.0000%", "border": 1, "align": "right"}
    )
    text_cell = wb.add_format({"font_name": base_font, "font_size": 11, "border": 1, "align": "left"})

    stripe_date = wb.add_format({"bg_color": "#FBFDFF", "num_format": "yyyy-mm-dd"})
    stripe_money2 = wb.add_format({"bg_color": "#FBFDFF", "num_format": "#,##0.00", "align": "right"})
    for f in (stripe_date, stripe_money2):
        f.set_border(1)
        f.set_font_name(base_font)
        f.set_font_size(11)

    # ----------------------------
    # Sheet 1: Account Values
    # ----------------------------
    ws = wb.add_worksheet("Account Values")

    ws.set_column(0, 0, 12)  # Date
    ws.set_column(1, 1, 18)  # Balance
    ws.set_column(3, 4, 16)

    first_day = series[0][0] if series else ""
    last_day = series[-1][0] if series else ""

    ws.write(0, 0, "User", meta_label)
    ws.write(0, 1, user.name, meta_value)

    ws.write(1, 0, "Range", meta_label)
    ws.write(1, 1, f"{first_day} to {last_day}", subtle)

    ws.write(2, 0, "Current Rate", meta_label)
    ws.write_number(2, 1, current_rate, rate4)

    ws.write(2, 3, "Generated", meta_label)
    ws.write(2, 4, datetime.now().strftime("%Y-%m-%d %H:%M"), subtle)

    ws.set_row(3, 18)
    for c, h in enumerate(["Date", "Balance"]):
        ws.write(3, c, h, header)

    ws.freeze_panes(4, 1)

    r = 4
    for day, balance in series:
        d = parse_date(day)
        if d is not None:
            ws.write_datetime(r, 0, datetime.combine(d, time.min), date_fmt)
        else:
            ws.write(r, 0, day, text_cell)
        ws.write_number(r, 1, balance, money2)
        r += 1

    last_data_row = r - 1

    if last_data_row >= 4:
        ws.autofilter(3, 0, last_data_row, 1)

        ws.conditional_format(
            4, 0, last_data_row, 0, {"type": "formula", "criteria": "=MOD(ROW(),2)=0", "format": stripe_date}
        )
        ws.conditional_format(
            4, 1, last_data_row, 1, {"type": "formula", "criteria": "=MOD(ROW(),2)=0", "format": stripe_money2}
        )

        chart = wb.add_chart({"type": "line"})
        chart.add_series(
            {
                "name": "Balance",
                "categories": ["Account Values", 4, 0, last_data_row, 0],
                "values": ["Account Values", 4, 1, last_data_row, 1],
                "line": {"width": 1.5, "color": "#2563EB"},
            }
        )
        chart.set_title({"name": f"{user.name} account value"})
        chart.set_x_axis({"date_axis": True, "num_format": "yyyy-mm-dd"})
        chart.set_y_axis({"num_format": "#,##0"})
        chart.set_legend({"none": True})
        ws.insert_chart(4, 3, chart, {"x_scale": 1.6, "y_scale": 1.4})

    # ----------------------------
    # Sheet 2: Transactions (raw inputs)
    # ----------------------------
    ts = wb.add_worksheet("Transactions")
    ts.set_column(0, 0, 12)
    ts.set_column(1, 1, 14)
    ts.set_column(2, 2, 16)

    for c, h in enumerate(["Date", "Type", "Amount"]):
        ts.write(0, c, h, header)

    tr = 1
    for t in user.transactions:
        ts.write(tr, 0, t.date, text_cell)
        ts.write(tr, 1, t.type, text_cell)
        ts.write_number(tr, 2, t.amount, money2)
        tr += 1

    tr += 1
    for c, h in enumerate(["Start", "End", "Rate"]):
        ts.write(tr, c, h, header)
    tr += 1
    for iv in user.intervals:
        ts.write(tr, 0, iv.start_date, text_cell)
        ts.write(tr, 1, iv.end_date, text_cell)
        ts.write_number(tr, 2, iv.rate, rate4)
        tr += 1

    wb.close()
