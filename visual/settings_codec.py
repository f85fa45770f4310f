"""Encoding/decoding helpers for VisualSettings payloads.

Payloads use the host's object shape: one camelCase object per settings
section (`categoryAxis`, `valueAxis`, ...), each holding camelCase properties.
Colors may be plain strings or `{"solid": {"color": ...}}` fills. Missing
properties keep their defaults; unknown sections are ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final, cast

import yaml

from dumbbell.settings import (
    ORIENTATIONS,
    CategoryAxisSettings,
    ConnectingLineSettings,
    DataLabelSettings,
    DataPointSettings,
    ValueAxisSettings,
    VisualSettings,
)

_SECTION_FIELDS: Final[dict[str, dict[str, str]]] = {
    "categoryAxis": {
        "orientation": "orientation",
        "innerPadding": "inner_padding",
        "color": "color",
        "fontSize": "font_size",
        "fontFamily": "font_family",
    },
    "valueAxis": {
        "color": "color",
        "fontSize": "font_size",
        "fontFamily": "font_family",
        "displayUnits": "display_units",
        "decimalPlaces": "decimal_places",
    },
    "dataPoints": {
        "radius": "radius",
        "formatStringMissing": "format_string_missing",
        "fillColor": "fill_color",
    },
    "connectingLines": {
        "strokeWidth": "stroke_width",
        "color": "color",
    },
    "dataLabels": {
        "show": "show",
    },
}

_COLOR_FIELDS: Final[frozenset[str]] = frozenset({"color", "fill_color"})
_NUMBER_FIELDS: Final[frozenset[str]] = frozenset(
    {"inner_padding", "font_size", "display_units", "radius", "stroke_width"}
)


def decode_visual_settings(payload: dict[str, Any] | None) -> VisualSettings:
    """Decode VisualSettings from a host object payload.

    Args:
        payload: Mapping of section name -> property mapping, or None.

    Returns:
        VisualSettings with defaults for anything not supplied. Values are not
        range-checked here (see `visual.validator`).

    Raises:
        ValueError: When a section is not a mapping, a property is unknown, a
            value has the wrong type, or the orientation is not supported.
    """

    payload = payload or {}
    sections: dict[str, dict[str, Any]] = {}
    for section, fields in _SECTION_FIELDS.items():
        raw = payload.get(section)
        if raw is None:
            sections[section] = {}
            continue
        if not isinstance(raw, dict):
            raise ValueError(f"Settings section {section!r} must be a mapping, got {type(raw).__name__}.")
        decoded: dict[str, Any] = {}
        for key, value in cast(dict[str, Any], raw).items():
            field_name = fields.get(key)
            if field_name is None:
                raise ValueError(f"Unknown property {section}.{key}.")
            if value is None:
                continue
            decoded[field_name] = _decode_value(section, field_name, value)
        sections[section] = decoded

    return VisualSettings(
        category_axis=CategoryAxisSettings(**sections["categoryAxis"]),
        value_axis=ValueAxisSettings(**sections["valueAxis"]),
        data_points=DataPointSettings(**sections["dataPoints"]),
        connecting_lines=ConnectingLineSettings(**sections["connectingLines"]),
        data_labels=DataLabelSettings(**sections["dataLabels"]),
    )


def _decode_value(section: str, field_name: str, value: object) -> object:
    """Decode and type-check one property value."""

    if field_name in _COLOR_FIELDS:
        return _parse_color(section, field_name, value)
    if field_name in _NUMBER_FIELDS:
        return _parse_number(section, field_name, value)
    if field_name == "decimal_places":
        number = _parse_number(section, field_name, value)
        if number != int(number):
            raise ValueError(f"{section}.{field_name} must be a whole number, got {value!r}.")
        return int(number)
    if field_name == "orientation":
        if value not in ORIENTATIONS:
            raise ValueError(f"{section}.orientation must be one of {list(ORIENTATIONS)}, got {value!r}.")
        return value
    if field_name == "show":
        if not isinstance(value, bool):
            raise ValueError(f"{section}.show must be a boolean, got {value!r}.")
        return value
    if not isinstance(value, str):
        raise ValueError(f"{section}.{field_name} must be a string, got {value!r}.")
    return value


def _parse_number(section: str, field_name: str, value: object) -> float:
    """Parse an int/float (bools are rejected)."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{section}.{field_name} must be a number, got {value!r}.")
    return value


def _parse_color(section: str, field_name: str, value: object) -> str:
    """Parse a plain color string or a `{"solid": {"color": ...}}` fill."""

    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        solid = cast(dict[str, Any], value).get("solid")
        if isinstance(solid, dict) and isinstance(solid.get("color"), str):
            return cast(str, solid["color"])
    raise ValueError(f"{section}.{field_name} must be a color string or solid fill, got {value!r}.")


def encode_visual_settings(settings: VisualSettings) -> dict[str, dict[str, Any]]:
    """Encode VisualSettings into the host object payload shape.

    Args:
        settings: Settings to encode.

    Returns:
        Dict payload accepted by `decode_visual_settings`.
    """

    sources: dict[str, object] = {
        "categoryAxis": settings.category_axis,
        "valueAxis": settings.value_axis,
        "dataPoints": settings.data_points,
        "connectingLines": settings.connecting_lines,
        "dataLabels": settings.data_labels,
    }
    return {
        section: {key: getattr(sources[section], field_name) for key, field_name in fields.items()}
        for section, fields in _SECTION_FIELDS.items()
    }


def parse_visual_settings_yaml(text: str) -> VisualSettings:
    """Decode VisualSettings from a YAML document.

    Raises:
        ValueError: When the document is not a mapping or fails decoding.
    """

    payload = yaml.safe_load(text)
    if payload is None:
        return VisualSettings()
    if not isinstance(payload, dict):
        raise ValueError("Settings YAML must contain a mapping at the top level.")
    return decode_visual_settings(cast(dict[str, Any], payload))


def load_visual_settings(path: Path | str) -> VisualSettings:
    """Load VisualSettings from a YAML file."""

    return parse_visual_settings_yaml(Path(path).read_text(encoding="utf-8"))
