"""
Spreadsheet exports for the club treasurer.
Includes:
- Cashier balances with each player's unpaid sessions
- Annual ranking for the selected year
- Full session history as CSV
"""
from __future__ import annotations

import csv
import datetime as dt
import io
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from sqlalchemy.orm import Session as DBSession

from ..core.deps import get_db, require_admin
from ..dal import repository
from ..models.entities import SessionEntity
from ..services import cashier_service, ledger, ranking_service
from ..services.cashier_service import PlayerBalance
from ..services.ranking_service import RankingEntry

router = APIRouter(prefix="/api/reports", tags=["reports"])

# Style constants
HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
MONEY_POSITIVE_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
MONEY_NEGATIVE_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _style_header(ws, row: int, cols: int):
    """Apply header styling to a row."""
    for col in range(1, cols + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = THIN_BORDER


def _money_fill(cell, amount: int):
    if amount > 0:
        cell.fill = MONEY_POSITIVE_FILL
    elif amount < 0:
        cell.fill = MONEY_NEGATIVE_FILL


def _auto_width(ws):
    """Fit columns to their longest value, between 12 and 60 characters."""
    for column_cells in ws.columns:
        max_length = 0
        column = column_cells[0].column_letter
        for cell in column_cells:
            if cell.value is not None:
                max_length = max(max_length, len(str(cell.value)))
        ws.column_dimensions[column].width = max(min(max_length + 4, 60), 12)


def _attachment_headers(filename: str) -> dict[str, str]:
    return {
        "Content-Disposition": (
            f'attachment; filename="{filename}"; '
            f"filename*=UTF-8''{quote(filename)}"
        )
    }


def _create_cashier_sheet(wb: Workbook, balances: list[PlayerBalance]):
    """Create sheet with per-player balance and the sessions behind it."""
    ws = wb.create_sheet(title="Cashier")

    headers = ["Player", "Balance", "Session", "Amount"]
    for col, h in enumerate(headers, 1):
        ws.cell(row=1, column=col, value=h)
    _style_header(ws, 1, len(headers))

    row = 2
    for b in balances:
        ws.cell(row=row, column=1, value=b.player.name).font = Font(bold=True)
        _money_fill(ws.cell(row=row, column=2, value=b.balance), b.balance)
        row += 1
        for entry in b.unpaid_sessions:
            ws.cell(row=row, column=3, value=entry.session_name)
            _money_fill(ws.cell(row=row, column=4, value=entry.amount), entry.amount)
            row += 1

    totals = cashier_service.cashier_totals(balances)
    row += 1
    ws.cell(row=row, column=1, value="Total to receive").font = Font(bold=True)
    ws.cell(row=row, column=2, value=totals.total_to_receive).fill = MONEY_NEGATIVE_FILL
    row += 1
    ws.cell(row=row, column=1, value="Total to pay out").font = Font(bold=True)
    ws.cell(row=row, column=2, value=totals.total_to_pay_out).fill = MONEY_POSITIVE_FILL

    _auto_width(ws)


def _create_ranking_sheet(wb: Workbook, entries: list[RankingEntry], year: int):
    """Create sheet with the annual leaderboard."""
    ws = wb.create_sheet(title=f"Ranking {year}")

    headers = ["#", "Player", "Profit"]
    for col, h in enumerate(headers, 1):
        ws.cell(row=1, column=col, value=h)
    _style_header(ws, 1, len(headers))

    if not entries:
        ws.cell(row=2, column=1, value="No games in the selected year")
        ws.cell(row=2, column=1).font = Font(italic=True)
        _auto_width(ws)
        return

    for pos, e in enumerate(entries, 1):
        ws.cell(row=pos + 1, column=1, value=pos)
        ws.cell(row=pos + 1, column=2, value=e.name)
        _money_fill(ws.cell(row=pos + 1, column=3, value=e.profit), e.profit)

    _auto_width(ws)


def build_workbook(sessions: list[SessionEntity], players, year: int) -> Workbook:
    wb = Workbook()
    wb.remove(wb.active)  # Remove default sheet

    _create_cashier_sheet(wb, cashier_service.compute_balances(sessions, players))
    _create_ranking_sheet(wb, ranking_service.annual_ranking(sessions, year), year)
    return wb


@router.get("/cashier.xlsx", dependencies=[Depends(require_admin)])
def export_cashier(
    year: int | None = Query(default=None, ge=2000, le=2100),
    db: DBSession = Depends(get_db),
):
    """XLSX with cashier balances and the annual ranking."""
    sessions = repository.list_sessions(db)
    year = year or dt.date.today().year

    wb = build_workbook(sessions, repository.list_players(db), year)
    output = io.BytesIO()
    wb.save(output)
    output.seek(0)

    filename = f"club_report_{year}.xlsx"
    return StreamingResponse(output, media_type=XLSX_MEDIA_TYPE, headers=_attachment_headers(filename))


def _sanitize_cell(v: str) -> str:
    """Remove line breaks and tabs so every participant stays on one row."""
    return v.replace("\r", " ").replace("\n", " ").replace("\t", " ")


@router.get("/sessions.csv", dependencies=[Depends(require_admin)])
def export_sessions(db: DBSession = Depends(get_db)):
    sessions = repository.list_sessions(db)

    def gen():
        buf = io.StringIO()
        w = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)

        w.writerow(["session_id", "session", "date", "player", "total_invested", "final_chips", "profit", "payment"])
        yield buf.getvalue()
        buf.seek(0)
        buf.truncate(0)

        for s in sessions:
            day = s.game_date.isoformat() if s.game_date else ""
            for p in s.participants:
                w.writerow(
                    [
                        s.id,
                        _sanitize_cell(s.name),
                        day,
                        _sanitize_cell(p.name),
                        p.total_invested,
                        p.final_chips,
                        ledger.profit(p),
                        p.payment_status.value,
                    ]
                )
                yield buf.getvalue()
                buf.seek(0)
                buf.truncate(0)

    return StreamingResponse(gen(), media_type="text/csv", headers=_attachment_headers("sessions.csv"))
