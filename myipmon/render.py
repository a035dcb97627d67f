"""Screen rendering — rich panels around plotext traffic charts.

``render`` turns one snapshot into a rich ``Layout`` sized to the given
area. It only reads the snapshot and keeps no reference to it.
"""

from __future__ import annotations

import plotext as plt
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from myipmon.layout import (
    Rect,
    chart_axis,
    compute_layout,
    screen_regions,
    split_cell,
    x_bounds,
)
from myipmon.models import Interface, NetworkSnapshot
from myipmon.units import format_bytes

RX_COLOR = "green"
TX_COLOR = "red"
MIN_CHART_WIDTH = 4
MIN_CHART_HEIGHT = 2


def render(
    snapshot: NetworkSnapshot,
    area: Rect | tuple[int, int],
    *,
    rate_scale: float = 1.0,
    show_debug: bool = True,
) -> Layout:
    """Build the full screen for ``snapshot`` inside ``area`` (width, height)."""
    if isinstance(area, tuple):
        area = Rect(0, 0, *area)
    regions = screen_regions(area, show_debug)

    parts = [
        (regions.header, "header", render_header(snapshot)),
        (regions.public_ip, "public_ip", render_public_ip(snapshot)),
        (regions.interfaces, "interfaces", render_interfaces(snapshot, regions.interfaces, rate_scale)),
    ]
    if regions.debug is not None:
        parts.append((regions.debug, "debug", render_debug(snapshot)))
    parts.append((regions.footer, "footer", render_footer(snapshot)))

    root = Layout(name="root")
    root.split_column(*[Layout(r, name=name, size=rect.height) for rect, name, r in parts if rect.height > 0])
    return root


def render_header(snapshot: NetworkSnapshot) -> Panel:
    text = Text.assemble(
        ("Network Information for ", "bold cyan"),
        (snapshot.hostname, "bold green"),
        justify="center",
    )
    return Panel(text, title="MyIP", border_style="blue")


def render_public_ip(snapshot: NetworkSnapshot) -> Panel:
    if snapshot.public_ip:
        ip, color = snapshot.public_ip, "green"
    else:
        ip, color = "Unknown", "red"
    text = Text.assemble(("Public IP: ", "bold white"), (ip, f"bold {color}"), justify="center")
    return Panel(text, title=" External IP ", border_style="magenta")


def render_interfaces(snapshot: NetworkSnapshot, area: Rect, rate_scale: float = 1.0) -> Layout:
    grid = compute_layout(len(snapshot.interfaces), area)
    region = Layout(name="grid")
    if not grid.rows:
        region.update(Text(""))
        return region

    rows = []
    for i, row in enumerate(grid.rows):
        row_layout = Layout(name=f"row{i}", size=row[0].rect.height)
        cells = []
        for cell in row:
            if cell.index is None:
                cells.append(Layout(Text(""), name=f"empty{i}", size=cell.rect.width))
                continue
            iface = snapshot.interfaces[cell.index]
            cells.append(
                render_cell(iface, cell.rect, snapshot.history_size, rate_scale, name=f"iface{cell.index}")
            )
        row_layout.split_row(*cells)
        rows.append(row_layout)
    region.split_column(*rows)
    return region


def render_cell(
    iface: Interface,
    rect: Rect,
    history_size: int,
    rate_scale: float = 1.0,
    *,
    name: str | None = None,
) -> Layout:
    table_rect, chart_rect = split_cell(rect)
    cell = Layout(name=name, size=rect.width)
    parts = []
    if table_rect.height > 0:
        parts.append(Layout(render_info_table(iface), size=table_rect.height))
    if chart_rect.height > 0:
        parts.append(Layout(render_chart(iface, chart_rect, history_size, rate_scale), size=chart_rect.height))
    if parts:
        cell.split_column(*parts)
    else:
        cell.update(Text(""))
    return cell


def _address_rows(table: Table, label: str, addresses: list[str], style: str) -> None:
    for i, addr in enumerate(addresses):
        table.add_row(Text(label if i == 0 else "", style="cyan"), Text(addr, style=style))


def render_info_table(iface: Interface) -> Panel:
    table = Table(
        show_header=True,
        header_style="bold yellow",
        box=None,
        expand=True,
        padding=(0, 1, 0, 0),
    )
    table.add_column("Property", ratio=3, no_wrap=True)
    table.add_column("Value", ratio=7, no_wrap=True, overflow="ellipsis")

    status, status_color = ("up", "green") if iface.is_up else ("down", "red")
    table.add_row(Text("Status", style="cyan"), Text(status, style=f"bold {status_color}"))
    if iface.mac_address is not None:
        table.add_row(Text("MAC Address", style="cyan"), Text(iface.mac_address, style="yellow"))
    if iface.mtu is not None:
        table.add_row(Text("MTU", style="cyan"), Text(str(iface.mtu)))
    if iface.speed_mbps is not None:
        table.add_row(Text("Speed", style="cyan"), Text(f"{iface.speed_mbps} Mbps"))
    if iface.received_bytes > 0:
        table.add_row(Text("RX Bytes", style="cyan"), Text(format_bytes(iface.received_bytes), style="magenta"))
    if iface.transmitted_bytes > 0:
        table.add_row(Text("TX Bytes", style="cyan"), Text(format_bytes(iface.transmitted_bytes), style="magenta"))
    _address_rows(table, "IPv4 Address", iface.ipv4_addresses, "bold green")
    _address_rows(table, "IPv6 Address", iface.ipv6_addresses, "blue")

    return Panel(table, title=f" {iface.name} ", border_style="cyan")


def render_chart(iface: Interface, rect: Rect, history_size: int, rate_scale: float = 1.0) -> Panel:
    """Overlaid RX/TX braille lines sharing one Y axis."""
    rx, tx = iface.rate.rx, iface.rate.tx
    axis = chart_axis(rx.peak, tx.peak, rate_scale)
    title = f" Network Traffic ({axis.unit}) "

    width, height = rect.width - 2, rect.height - 2
    if width < MIN_CHART_WIDTH or height < MIN_CHART_HEIGHT:
        return Panel(Text(""), title=title, border_style="cyan")

    xs = list(range(len(rx.samples)))
    plt.clf()
    plt.theme("clear")
    plt.plotsize(width, height)
    plt.plot(xs, axis.scale(rx.samples, rate_scale), label="RX", color=RX_COLOR, marker="braille")
    plt.plot(xs, axis.scale(tx.samples, rate_scale), label="TX", color=TX_COLOR, marker="braille")
    plt.frame(False)
    plt.xticks([])
    plt.yticks(list(axis.ticks), list(axis.labels))
    plt.xlim(*x_bounds(history_size))
    plt.ylim(0, axis.scaled_max)
    plt.grid(False, False)

    chart = Text.from_ansi(plt.build().rstrip("\n"), no_wrap=True)
    return Panel(chart, title=title, border_style="cyan", padding=0)


def _joined_line(label: str, names: list[str], label_style: str, value_style: str) -> Text:
    return Text.assemble((label, f"bold {label_style}"), (", ".join(names), value_style))


def render_debug(snapshot: NetworkSnapshot) -> Panel:
    info = snapshot.debug_info
    lines = [Text("Debug Information", style="bold yellow")]
    if "address_sources" in info:
        lines.append(_joined_line("Address Sources: ", info["address_sources"], "blue", "green"))
    if "traffic_sources" in info:
        lines.append(_joined_line("Traffic Sources: ", info["traffic_sources"], "blue", "cyan"))
    if info.get("no_stats"):
        lines.append(_joined_line("No Stats: ", info["no_stats"], "red", "white"))
    if snapshot.last_error:
        lines.append(Text.assemble(("Last Error: ", "bold red"), (snapshot.last_error, "red")))
    return Panel(Text("\n").join(lines), title="Debug Info", border_style="magenta")


def render_footer(snapshot: NetworkSnapshot) -> Panel:
    text = Text.assemble(
        "Press 'q' or ESC to exit",
        ("   refresh #", "dim"),
        (str(snapshot.cycle_count), "dim"),
        justify="center",
    )
    return Panel(text)
