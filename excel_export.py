"""
Excel report export for What's My Share
"""
from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from computations import compute_summary, filter_expenses_by_date
from debt_simplifier import generate_explanation, simplify
from models import Group
from utils import CURRENCY_SYMBOL, DECIMAL_PLACES

def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=60):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            if cell.value is None:
                continue
            # multi-line cells are as wide as their longest line
            max_len = max(max_len, *(len(line) for line in str(cell.value).split("\n")))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _major(minor: int, decimals: int) -> Decimal:
    return Decimal(minor).scaleb(-decimals)


def _money_format(decimals: int) -> str:
    """Excel number format with the given number of decimal places"""
    return "#,##0" + ("." + "0" * decimals if decimals > 0 else "")


def _money_columns(ws, first_col, last_col, decimals=DECIMAL_PLACES):
    fmt = _money_format(decimals)
    for r in range(2, ws.max_row + 1):
        for c in range(first_col, last_col + 1):
            ws.cell(r, c).number_format = fmt


def export_excel(
    group: Group,
    filepath: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    symbol: str = CURRENCY_SYMBOL,
    decimals: int = DECIMAL_PLACES,
) -> None:
    """
    Export group to Excel file with sheets:
    - Expenses: one row per expense, one share column per member
    - Summary: paid, owed, settled and net per member
    - Transfers: simplified payments that settle the net balances
    - Explanation: the simplification narrated step by step
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    summary = compute_summary(group, start, end)
    people = list(summary)
    exps = filter_expenses_by_date(group.expenses, start, end)

    ws = wb.create_sheet("Expenses")
    ws.append(["Date", "Description", "Amount", "Paid by", "Split"] + [group.display_name(p) for p in people])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for e in sorted(exps, key=lambda e: (e.date, e.description)):
        shares = {s.participant: s.amount for s in e.splits}
        paid_by = ", ".join(group.display_name(p) for p in e.paid_by)
        row = [e.date, e.description, _major(e.amount, decimals), paid_by, e.split_type]
        row += [_major(shares[p], decimals) if p in shares else None for p in people]
        ws.append(row)

    if exps:
        ws.append(["TOTALS"])
        trow = ws.max_row
        ws.cell(trow, 1).font = Font(bold=True)
        for col in [3] + list(range(6, 6 + len(people))):
            letter = get_column_letter(col)
            ws.cell(trow, col).value = f"=SUM({letter}2:{letter}{trow - 1})"
    _money_columns(ws, 3, 3, decimals)
    _money_columns(ws, 6, 5 + len(people), decimals)
    _autosize_columns(ws)

    ws = wb.create_sheet("Summary")
    ws.append(["Member", "Paid", "Owed", "Settled (paid)", "Settled (received)", "Net"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for p in people:
        s = summary[p]
        ws.append([group.display_name(p)] + [
            _major(s[k], decimals) for k in ("paid", "owed", "settled_out", "settled_in", "net")
        ])
    _money_columns(ws, 2, 6, decimals)
    _autosize_columns(ws)

    net = {p: summary[p]["net"] for p in people}
    has_debts = any(net.values())

    ws = wb.create_sheet("Transfers")
    ws.append(["From (Debtor)", "To (Creditor)", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    if has_debts:
        for t in simplify(net):
            ws.append([group.display_name(t.debtor), group.display_name(t.creditor), _major(t.amount, decimals)])
    _money_columns(ws, 3, 3, decimals)
    _autosize_columns(ws)

    ws = wb.create_sheet("Explanation")
    ws.append(["Step", "Details"])
    _style_header(ws, 1)
    if net:
        for step in generate_explanation(net, group.display_names, symbol, decimals):
            ws.append([step.title, step.description])
            ws.cell(ws.max_row, 2).alignment = Alignment(wrap_text=True, vertical="top")
    _autosize_columns(ws)

    wb.save(filepath)
