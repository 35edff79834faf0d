"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Price listings are printed bare, one directive per line, so the output
can be appended straight to a ledger file.
"""

from __future__ import annotations

import json
from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.text import Text
from ruamel.yaml import YAML

from pricectl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from pricectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose and result.op not in _LEDGER_OPS:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op in _LEDGER_OPS:
        return "\n".join(result.data.get("lines", []))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="price.ok"), Text(f"  {result.op}", style="price.op"))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        console.print(f"    {key}: {json.dumps(value, separators=(',', ':'))}")


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="price.error"),
        Text(f"  {result.op}", style="price.op"),
        Text(" — "),
        Text(msg),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_price_lines(result: ServiceResult, console: Console) -> None:
    for line in result.data.get("lines", []):
        console.print(Text(line), soft_wrap=True)


def _render_usage(result: ServiceResult, console: Console) -> None:
    yaml = YAML()
    yaml.default_flow_style = False
    buf = StringIO()
    yaml.dump(result.data, buf)
    console.print(Text(buf.getvalue().rstrip("\n")), soft_wrap=True)


def _render_generic(result: ServiceResult, console: Console) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value, separators=(",", ":"))
        console.print(Text(f"  {key}: ", style="price.key"), Text(str(value)))


# ── Dispatch table ────────────────────────────────────────────────────

_LEDGER_OPS = frozenset({"series", "latest"})

_OP_RENDERERS: dict[str, Any] = {
    "series": _render_price_lines,
    "latest": _render_price_lines,
    "usage": _render_usage,
}
