"""Number formatting for axis labels, data points and tooltips.

Format strings follow the spreadsheet-style patterns hosts attach to measure
columns (e.g. `#,##0.00`, `$#,##0`, `0.0%`, `"Total: "0`). Only the positive
section of a multi-section pattern is used; negative values get a leading minus
sign. Display units scale values down and append a compact suffix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

AUTO_DISPLAY_UNITS: Final[int] = 0
NO_DISPLAY_UNITS: Final[int] = 1

DISPLAY_UNIT_SUFFIXES: Final[dict[int, str]] = {
    1_000: "K",
    1_000_000: "M",
    1_000_000_000: "bn",
    1_000_000_000_000: "T",
}

BLANK_LABEL: Final[str] = "(Blank)"

_NUMERIC_CHARS: Final[str] = "#0,."
_AUTO_UNIT_DECIMALS: Final[int] = 2


@dataclass(frozen=True, slots=True)
class NumberLocale:
    """Separators used when rendering numbers.

    Args:
        decimal_separator: Character placed between integer and fraction.
        group_separator: Character placed between thousands groups.
    """

    decimal_separator: str = "."
    group_separator: str = ","


DEFAULT_LOCALE: Final[NumberLocale] = NumberLocale()


@dataclass(frozen=True, slots=True)
class FormatPattern:
    """Parsed positive section of a format string.

    Args:
        prefix: Literal text rendered before the number.
        suffix: Literal text rendered after the number.
        min_decimals: Fraction digits always rendered (`0` placeholders).
        max_decimals: Fraction digits rendered when non-zero (`0` and `#`).
        grouping: Whether thousands separators are rendered.
        percent: Whether the value is multiplied by 100.
        general: True when the pattern carries no numeric placeholders.
    """

    prefix: str = ""
    suffix: str = ""
    min_decimals: int = 0
    max_decimals: int = 0
    grouping: bool = False
    percent: bool = False
    general: bool = False


GENERAL_PATTERN: Final[FormatPattern] = FormatPattern(general=True)


def parse_format_string(format_string: str | None) -> FormatPattern:
    """Parse a format string into a FormatPattern.

    Args:
        format_string: Pattern such as `#,##0.00`; None, empty or `General`
            yields the general pattern.

    Returns:
        FormatPattern describing the positive section.
    """

    if format_string is None or not format_string.strip() or format_string.strip().lower() == "general":
        return GENERAL_PATTERN

    prefix: list[str] = []
    numeric: list[str] = []
    suffix: list[str] = []
    percent = False
    state = "prefix"

    def emit_literal(text: str) -> None:
        nonlocal state
        if state == "prefix":
            prefix.append(text)
        else:
            state = "suffix"
            suffix.append(text)

    idx = 0
    section = _first_section(format_string)
    while idx < len(section):
        ch = section[idx]
        if ch == '"':
            end = section.find('"', idx + 1)
            if end == -1:
                end = len(section)
            emit_literal(section[idx + 1 : end])
            idx = end + 1
            continue
        if ch == "\\" and idx + 1 < len(section):
            emit_literal(section[idx + 1])
            idx += 2
            continue
        if ch in _NUMERIC_CHARS and state != "suffix":
            state = "numeric"
            numeric.append(ch)
        else:
            if ch == "%":
                percent = True
            emit_literal(ch)
        idx += 1

    if not numeric:
        return FormatPattern(prefix="".join(prefix), suffix="".join(suffix), percent=percent, general=True)

    integer_part, _, fraction_part = "".join(numeric).partition(".")
    min_decimals = fraction_part.count("0")
    return FormatPattern(
        prefix="".join(prefix),
        suffix="".join(suffix),
        min_decimals=min_decimals,
        max_decimals=min_decimals + fraction_part.count("#"),
        grouping="," in integer_part.strip(","),
        percent=percent,
    )


def _first_section(format_string: str) -> str:
    """Return the text before the first unquoted `;`."""

    quoted = False
    for idx, ch in enumerate(format_string):
        if ch == '"':
            quoted = not quoted
        elif ch == ";" and not quoted:
            return format_string[:idx]
    return format_string


def resolve_display_units(display_units: float, *, reference_value: float | None) -> int:
    """Resolve a display units setting to a concrete divisor.

    Args:
        display_units: 0 for auto, 1 for none, or one of DISPLAY_UNIT_SUFFIXES.
        reference_value: Value used to pick units in auto mode (typically the
            largest absolute value being displayed).

    Returns:
        The divisor to apply (1 when no units apply).
    """

    if display_units == AUTO_DISPLAY_UNITS:
        if reference_value is None:
            return NO_DISPLAY_UNITS
        magnitude = abs(reference_value)
        for unit in sorted(DISPLAY_UNIT_SUFFIXES, reverse=True):
            if magnitude >= unit:
                return unit
        return NO_DISPLAY_UNITS
    unit = int(display_units)
    if unit in DISPLAY_UNIT_SUFFIXES:
        return unit
    return NO_DISPLAY_UNITS


@dataclass(frozen=True, slots=True)
class ValueFormatter:
    """Format numbers with a format string, display units and precision.

    Args:
        format_string: Spreadsheet-style pattern (None for general).
        display_units: Resolved divisor (1 for none; see `resolve_display_units`).
        decimal_places: Fixed fraction digits overriding the pattern, or None.
        locale: Separators to render with.
    """

    format_string: str | None = None
    display_units: int = NO_DISPLAY_UNITS
    decimal_places: int | None = None
    locale: NumberLocale = DEFAULT_LOCALE

    def format(self, value: float | None) -> str:
        """Render `value` as display text; None renders as `(Blank)`."""

        if value is None:
            return BLANK_LABEL

        pattern = parse_format_string(self.format_string)
        scaled = float(value)
        unit_suffix = ""
        if pattern.percent:
            scaled *= 100.0
        elif self.display_units != NO_DISPLAY_UNITS:
            scaled /= self.display_units
            unit_suffix = DISPLAY_UNIT_SUFFIXES.get(self.display_units, "")

        if self.decimal_places is not None:
            min_decimals = max_decimals = self.decimal_places
        elif pattern.general:
            min_decimals = 0
            max_decimals = _AUTO_UNIT_DECIMALS if unit_suffix else 10
        else:
            min_decimals, max_decimals = pattern.min_decimals, pattern.max_decimals

        text = _render_number(abs(scaled), min_decimals, max_decimals, pattern.grouping, self.locale)
        sign = "-" if scaled < 0 and any(ch.isdigit() and ch != "0" for ch in text) else ""
        return f"{sign}{pattern.prefix}{text}{unit_suffix}{pattern.suffix}"


def _render_number(
    value: float,
    min_decimals: int,
    max_decimals: int,
    grouping: bool,
    locale: NumberLocale,
) -> str:
    """Render a non-negative number with optional fraction digits trimmed."""

    text = f"{value:,.{max_decimals}f}" if grouping else f"{value:.{max_decimals}f}"
    if max_decimals > min_decimals:
        integer, _, fraction = text.partition(".")
        fraction = fraction.rstrip("0").ljust(min_decimals, "0")
        text = f"{integer}.{fraction}" if fraction else integer
    return text.translate(str.maketrans({",": locale.group_separator, ".": locale.decimal_separator}))


def create_value_formatter(
    format_string: str | None,
    *,
    display_units: float = NO_DISPLAY_UNITS,
    decimal_places: int | None = None,
    reference_value: float | None = None,
    locale: NumberLocale = DEFAULT_LOCALE,
) -> ValueFormatter:
    """Build a ValueFormatter, resolving auto display units.

    Args:
        format_string: Spreadsheet-style pattern.
        display_units: Display units setting (0 = auto).
        decimal_places: Fixed fraction digits, or None for the pattern's.
        reference_value: Value used to resolve auto display units.
        locale: Separators to render with.

    Returns:
        ValueFormatter ready to format values.
    """

    return ValueFormatter(
        format_string=format_string,
        display_units=resolve_display_units(display_units, reference_value=reference_value),
        decimal_places=decimal_places,
        locale=locale,
    )
