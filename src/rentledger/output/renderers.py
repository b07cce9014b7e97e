"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import calendar as _calendar
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from rentledger.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from rentledger.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal, which is
    the case inside Click's CliRunner and piped output.
    """
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: ids, or an OK line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(
            str(item["id"]) for item in items if isinstance(item, dict) and "id" in item
        )
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="rl.ok"), Text(f"  {result.op}", style="rl.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="rl.key")
    if value is None:
        v = Text("-", style="dim")
    elif key == "id" or key.endswith("_id"):
        v = Text(str(value), style="rl.id")
    elif key in ("name", "full_name"):
        v = Text(str(value), style="rl.name")
    elif key in ("status", "payment_status"):
        v = Text(str(value), style=style_for_status(str(value)))
    elif isinstance(value, list):
        v = Text(", ".join(str(x) for x in value) or "-")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="rl.error"),
        Text(f"  {result.op}", style="rl.op"),
        Text(f": {msg}"),
        sep="",
    )
    if err is None:
        return
    for path, message in err.field_errors.items():
        console.print(Text(f"  {path}: ", style="rl.key"), Text(str(message)), sep="")
    if verbose:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            if k != "fields":
                console.print(Text(f"    {k}: {v}"))


# ── Techniques ────────────────────────────────────────────────────────


def _render_technique(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single technique with its accrual figures."""
    d = result.data
    _status_line(console, result)
    lines = [
        f"status: [{style_for_status(str(d.get('status')))}]{d.get('status')}[/]",
        f"monthly rent: {d.get('monthly_rent')} / {d.get('planned_working_days')} days",
        f"daily rate: [rl.amount]{d.get('daily_rate')}[/rl.amount]",
        f"window: {d.get('start_date')} → {d.get('end_date') or 'ongoing'}",
        f"elapsed days: {d.get('total_elapsed_days')}",
        f"day-offs in window: {d.get('excluded_day_offs')}",
        f"net working days: {d.get('net_working_days')}",
        f"accrued rent: [rl.amount]{d.get('total_accrued_rent')}[/rl.amount]",
    ]
    inert = d.get("inert_day_offs")
    if inert:
        lines.append(f"[dim]kept outside window: {', '.join(inert)}[/dim]")
    if d.get("fields_changed"):
        lines.append(f"fields changed: {', '.join(d['fields_changed'])}")
    if d.get("transition"):
        lines.append(f"transition: {' → '.join(d['transition'])}")
    if d.get("description"):
        lines.append(f"\n{escape(d['description'])}")
    if verbose:
        lines.append(f"[dim]version {d.get('version')}, created {d.get('created_at')}[/dim]")

    title = escape(f"{d.get('id', '?')}: {d.get('name', '')}")
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))
    if verbose:
        _render_meta(console, result)


def _render_day_off(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "id", d.get("id"))
    _field(console, "day", d.get("day"))
    _field(console, "marked", "day-off" if d.get("marked") else "working")
    _field(console, "net_working_days", d.get("net_working_days"))
    _field(console, "total_accrued_rent", d.get("total_accrued_rent"))


def _render_technique_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="rl.id", no_wrap=True)
    table.add_column("Name", style="rl.name")
    table.add_column("Status")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Daily rate", justify="right")
    table.add_column("Net days", justify="right")
    table.add_column("Accrued", style="rl.amount", justify="right")
    if verbose:
        table.add_column("Day-offs", justify="right")

    for item in items:
        status = str(item.get("status", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            Text(str(item.get("name", ""))),
            Text(status, style=style_for_status(status)),
            str(item.get("start_date", "")),
            str(item.get("end_date") or "—"),
            str(item.get("daily_rate", "")),
            str(item.get("net_working_days", "")),
            str(item.get("total_accrued_rent", "")),
        ]
        if verbose:
            row.append(str(item.get("excluded_day_offs", "")))
        table.add_row(*row)

    console.print(table)
    console.print(
        f"\n{result.data.get('count', len(items))} techniques, "
        f"total active rent [rl.amount]{result.data.get('total_active_rent')}[/rl.amount]"
    )


def _render_calendar(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a month grid: day-offs marked ``x``, outside days dimmed."""
    d = result.data
    kinds = {entry["day"]: entry["kind"] for entry in d.get("days", [])}
    year, month = (int(part) for part in str(d.get("month")).split("-"))

    console.print(
        Text(f"{d.get('id')} {d.get('name')}", style="bold"),
        Text(f"  {_calendar.month_name[month]} {year}"),
        sep="",
    )
    table = Table(show_header=True, pad_edge=False, expand=False)
    for name in ("Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"):
        table.add_column(name, justify="right")

    for week in _calendar.Calendar(firstweekday=0).monthdatescalendar(year, month):
        cells: list[Any] = []
        for day in week:
            if day.month != month:
                cells.append("")
                continue
            kind = kinds.get(day.isoformat(), "outside")
            label = f"{day.day}x" if kind == "day_off" else str(day.day)
            cells.append(Text(label, style=f"rl.day.{kind}"))
        table.add_row(*cells)

    console.print(table)
    console.print(
        f"working days: {d.get('working_days')}  day-offs: {d.get('day_offs')}  "
        f"accrued this month: [rl.amount]{d.get('accrued_rent')}[/rl.amount]"
    )
    console.print(Text("x = day-off, dimmed = outside the rental window", style="dim"))


# ── Workers, notes, payments ──────────────────────────────────────────


def _render_worker(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    lines = [
        f"position: {d.get('position')}",
        f"monthly salary: {d.get('monthly_salary') or '—'}",
    ]
    if d.get("photo"):
        lines.append(f"photo: {d['photo']}")
    summary = d.get("month_summary")
    if summary:
        status = str(summary.get("status"))
        lines.append(
            f"{summary.get('month')}: paid [rl.amount]{summary.get('total_paid')}[/rl.amount]"
            f" ([{style_for_status(status)}]{status}[/])"
        )
        if summary.get("remaining") is not None:
            lines.append(f"remaining: {summary['remaining']}")
    if d.get("fields_changed"):
        lines.append(f"fields changed: {', '.join(d['fields_changed'])}")
    if d.get("description"):
        lines.append(f"\n{escape(d['description'])}")

    title = escape(f"{d.get('id', '?')}: {d.get('full_name', '')}")
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))

    payments = d.get("payments") or []
    if payments:
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("Payment", style="rl.id", no_wrap=True)
        table.add_column("Date")
        table.add_column("Amount", style="rl.amount", justify="right")
        table.add_column("Note")
        for p in payments:
            table.add_row(
                str(p["id"]), str(p["date"]), str(p["amount"]), Text(str(p.get("note") or ""))
            )
        console.print(table)

    for note in d.get("notes") or []:
        heading = note.get("title") or "Note"
        console.print(Text(note["id"], style="rl.id"), Text(f" {heading}", style="bold"), sep="")
        console.print(Text(f"  {note.get('content', '')}"))


def _render_worker_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="rl.id", no_wrap=True)
    table.add_column("Name", style="rl.name")
    table.add_column("Position")
    table.add_column("Salary", justify="right")
    table.add_column("Paid", style="rl.amount", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Status")
    for item in items:
        status = str(item.get("status", ""))
        table.add_row(
            str(item.get("id", "")),
            Text(str(item.get("full_name", ""))),
            Text(str(item.get("position", ""))),
            str(item.get("monthly_salary") or "—"),
            str(item.get("total_paid", "")),
            str(item.get("remaining") or "—"),
            Text(status, style=style_for_status(status)),
        )
    console.print(table)
    console.print(
        f"\n{result.data.get('count', len(items))} workers "
        f"({result.data.get('filter')}) for {result.data.get('month')}"
    )


def _payment_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Date")
    table.add_column("Worker", style="rl.name")
    table.add_column("Amount", style="rl.amount", justify="right")
    table.add_column("Note")
    for item in items:
        table.add_row(
            str(item.get("date", "")),
            Text(str(item.get("full_name", ""))),
            str(item.get("amount", "")),
            Text(str(item.get("note") or "")),
        )
    return table


def _render_recent(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No payments yet.")
        return
    console.print(_payment_table(items))


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render payment and note mutations as key-value lines."""
    _status_line(console, result)
    for key in ("id", "worker_id", "amount", "date", "title", "content", "note"):
        if key in result.data and result.data[key] is not None:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_deleted(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "deleted", result.data.get("id"))


# ── Dashboard ─────────────────────────────────────────────────────────


def _render_dashboard(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    tech = d.get("techniques", {})
    staff = d.get("workers", {})
    currency = f" {escape(d['currency'])}" if d.get("currency") else ""

    console.print(f"[bold]{escape(str(d.get('ledger')))}[/bold]  payroll month {d.get('month')}")
    console.print(
        Panel(
            "\n".join(
                [
                    f"active: {tech.get('active')} of {tech.get('total')}"
                    f" ({tech.get('ended')} ended)",
                    f"active rent: [rl.amount]{tech.get('total_active_rent')}{currency}[/rl.amount]",
                    f"all accrued rent: {tech.get('total_accrued_rent')}{currency}",
                ]
            ),
            title="Techniques",
            border_style="dim",
            expand=False,
        )
    )
    console.print(
        Panel(
            "\n".join(
                [
                    f"workers: {staff.get('total')}",
                    f"fully paid: {staff.get('fully_paid')}",
                    f"paid this month: [rl.amount]{staff.get('total_paid')}{currency}[/rl.amount]",
                    f"average salary: {staff.get('average_salary')}{currency}",
                ]
            ),
            title="Workers",
            border_style="dim",
            expand=False,
        )
    )
    recent = d.get("recent_payments") or []
    console.print("[bold]Recent payments[/bold]")
    if recent:
        console.print(_payment_table(recent))
    else:
        console.print("No payments yet.")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Techniques
    "add_technique": _render_technique,
    "update_technique": _render_technique,
    "end_technique": _render_technique,
    "get_technique": _render_technique,
    "list_techniques": _render_technique_table,
    "technique_calendar": _render_calendar,
    "toggle_day_off": _render_day_off,
    "add_day_off": _render_day_off,
    "remove_day_off": _render_day_off,
    "delete_technique": _render_deleted,
    # Workers
    "add_worker": _render_worker,
    "update_worker": _render_worker,
    "get_worker": _render_worker,
    "list_workers": _render_worker_table,
    "delete_worker": _render_deleted,
    # Payments and notes
    "add_payment": _render_mutation,
    "delete_payment": _render_deleted,
    "recent_payments": _render_recent,
    "add_note": _render_mutation,
    "update_note": _render_mutation,
    "delete_note": _render_deleted,
    # Reports
    "dashboard": _render_dashboard,
}
