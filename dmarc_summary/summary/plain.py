"""Plain-text rendering of report output items (used by the CLI)."""

from __future__ import annotations

from dmarc_summary.summary.report import Heading, LabeledList, Node, Paragraph, Table
from dmarc_summary.summary.view import ReportItem

_RULE = "-" * 40


def render_nodes(nodes: list[Node]) -> str:
    """Render a document tree as aligned plain text."""
    lines: list[str] = []
    for node in nodes:
        if isinstance(node, Heading):
            if lines:
                lines.append("")
            lines.append(node.text)
            lines.append(("=" if node.level <= 2 else "-") * len(node.text))
        elif isinstance(node, Paragraph):
            lines.append(node.text)
        elif isinstance(node, LabeledList):
            width = max((len(row.title) for row in node.rows), default=0) + 1
            for row in node.rows:
                lines.append(f"{row.title + ':':<{width}} {row.value}")
        elif isinstance(node, Table):
            lines.extend(_render_table(node))
    return "\n".join(lines)


def _render_table(table: Table) -> list[str]:
    # Header rows with row/col spans are flattened into the last header row,
    # prefixed by the group title of any spanning column.
    titles: list[str] = []
    groups: list[str] = []
    for cell in table.head[0]:
        if cell.colspan:
            groups.extend([cell.value] * cell.colspan)
        else:
            titles.append(cell.value)
    if len(table.head) > 1:
        titles.extend(
            f"{group} {cell.value}" for group, cell in zip(groups, table.head[1])
        )
    rows = [[cell.value for cell in row] for row in table.body]
    widths = [len(title) for title in titles]
    for row in rows:
        for i, value in enumerate(row):
            if i < len(widths):
                widths[i] = max(widths[i], len(value))
            else:
                widths.append(len(value))

    def fmt(values: list[str]) -> str:
        return "  ".join(f"{v:<{widths[i]}}" for i, v in enumerate(values)).rstrip()

    out = [table.caption, fmt(titles), _RULE]
    out.extend(fmt(row) for row in rows)
    return out


def render_items(items: list[ReportItem]) -> str:
    """Render the output of :meth:`SummaryView.fetch_and_render` as text."""
    chunks: list[str] = []
    for item in items:
        if item.kind == "html":
            chunks.append(render_nodes(item.nodes))
        elif item.is_rule:
            chunks.append(_RULE)
        elif item.kind == "separator":
            chunks.append(item.content.rstrip("\n"))
        else:
            chunks.append(item.content)
    return "\n".join(chunks)
