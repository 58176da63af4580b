"""Theme, color definitions, and display formatting utilities."""

from __future__ import annotations

from datetime import UTC, date, datetime

from hourglow.models.metrics import ProjectStatus

# ── Color palette — light theme with blue accents ──

COLORS = {
    "primary": "#2563EB",
    "secondary": "#0EA5E9",
    "accent": "#8B5CF6",
    "success": "#16A34A",
    "warning": "#F59E0B",
    "error": "#DC2626",
    "surface": "#FFFFFF",
    "bg": "#F8FAFC",
    "border": "#E2E8F0",
    "text": "#0F172A",
    "text_muted": "#64748B",
}

_TONE_COLORS = {
    "positive": COLORS["success"],
    "negative": COLORS["error"],
    "neutral": COLORS["text_muted"],
}


def status_color(status: ProjectStatus) -> str:
    """Badge color for a project status."""
    return _TONE_COLORS.get(status.tone, COLORS["text_muted"])


def format_hours(hours: float) -> str:
    """Format hours without trailing zeros: 85 -> "85h", 2.5 -> "2.5h"."""
    return f"{hours:,.2f}".rstrip("0").rstrip(".") + "h"


def format_currency(amount: float) -> str:
    """Format an amount with thousands separators, cents only when present."""
    if float(amount).is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def format_percent(value: float) -> str:
    return f"{value:.0f}%"


def format_date(value: date | None) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d")


def format_datetime(value: datetime | None) -> str:
    """Format a timestamp for observation lists.

    Examples: "Today 14:30", "Yesterday 09:15", "2025-11-03 10:00"
    """
    if value is None:
        return ""
    moment = value if value.tzinfo else value.replace(tzinfo=UTC)
    local = moment.astimezone()
    today = datetime.now(tz=local.tzinfo).date()
    time_part = local.strftime("%H:%M")
    delta = (today - local.date()).days
    if delta == 0:
        return f"Today {time_part}"
    if delta == 1:
        return f"Yesterday {time_part}"
    return f"{local.strftime('%Y-%m-%d')} {time_part}"
