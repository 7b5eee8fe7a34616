"""Plain-text rendering of dashboard field cards."""

from typing import Any, Dict, Iterable, List

from field_insights.aggregation import ValueEntry


BAR_WIDTH = 20
EMPTY_MESSAGE = 'Run "export" to load data'


def progress_bar(percentage: float, width: int = BAR_WIDTH) -> str:
    filled = int(round(max(0.0, min(percentage, 100.0)) / 100 * width))
    return "#" * filled + "." * (width - filled)


def render_top_entry(entry: ValueEntry, width: int = BAR_WIDTH) -> str:
    return (
        f"  [{entry.rank}] {entry.label}  {entry.count} ({entry.percentage}%)\n"
        f"      {progress_bar(entry.percentage_value, width)}"
    )


def render_remaining_entry(entry: ValueEntry) -> str:
    return f"  {entry.rank}. {entry.label}  {entry.count} ({entry.percentage}%)"


def render_field_card(card: Dict[str, Any], width: int = BAR_WIDTH) -> str:
    lines: List[str] = [
        card["field"],
        "-" * max(len(card["field"]), 8),
        f"  Total entries: {card['total_entries']}",
    ]
    lines.extend(render_top_entry(entry, width) for entry in card["top_values"])

    if card["expanded"]:
        lines.extend(render_remaining_entry(entry) for entry in card["remaining_values"])
    elif card["hidden_values"]:
        lines.append(f"  ... {card['hidden_values']} more value(s), use --expand {card['field']}")

    return "\n".join(lines)


def render_dashboard(cards: Iterable[Dict[str, Any]], width: int = BAR_WIDTH) -> str:
    rendered = [render_field_card(card, width) for card in cards]
    if not rendered:
        return EMPTY_MESSAGE
    return "\n\n".join(rendered)
