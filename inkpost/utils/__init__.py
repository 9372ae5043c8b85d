"""Utility helper functions."""

from inkpost.utils.helpers import (
    escape_like,
    format_datetime,
    get_summary,
    host,
    parse_positive_int,
    parse_uuid,
    respond,
    slugify,
    today_str,
)

__all__ = [
    "escape_like",
    "format_datetime",
    "get_summary",
    "host",
    "parse_positive_int",
    "parse_uuid",
    "respond",
    "slugify",
    "today_str",
]
