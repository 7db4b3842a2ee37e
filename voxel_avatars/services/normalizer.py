"""
Trait normalization service.

Maps free-form attribute entries onto the canonical TraitRecord schema:
- Known display names resolve to canonical keys
- Values are coerced per group (numeric, boolean, pass-through)
- Unknown traits are kept verbatim as extensions

Normalization never fails on a bad value. Unparseable numbers are stored
as NaN and rejected later by the assembler's validation gate.
"""

import math
import numbers
import re
from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from voxel_avatars.models.traits import (
    BOOLEAN_TRAITS,
    NUMERIC_TRAITS,
    TRAIT_NAME_MAP,
    RawAttribute,
    TraitRecord,
)

# String forms accepted for numeric traits: decimal literals and unsigned prefixed integers
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?Infinity")
PREFIXED_PATTERN = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")


def resolve_trait_key(name: str) -> str:
    """Get the canonical key for a display name; unknown names map to themselves."""
    return TRAIT_NAME_MAP.get(name, name)


def coerce_number(value: Any) -> float:
    """
    Coerce a raw value to a float.

    Strings are stripped and must be a plain decimal literal (optionally
    signed, with an exponent, or `Infinity`) or an unsigned hex, octal or
    binary literal (`0x10`, `0o17`, `0b101`). An empty string and None read
    as zero; booleans read as 1.0 / 0.0. Anything else is NaN, including
    Python-only spellings such as `1_000`, `inf` or `nan`.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, numbers.Real):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if DECIMAL_PATTERN.fullmatch(text):
            return float(text)
        if PREFIXED_PATTERN.fullmatch(text):
            try:
                return float(int(text, 0))
            except OverflowError:
                return math.inf
        return math.nan
    return math.nan


def coerce_flag(value: Any) -> bool:
    """Only the boolean True or the exact string "true" count as set."""
    return value is True or value == "true"


def normalize(attributes: Iterable[RawAttribute | Mapping[str, Any]]) -> TraitRecord:
    """
    Normalize a sequence of raw attributes into a TraitRecord.

    Entries without a name or without a `value` key are skipped. An explicit
    null value is kept: it reads as 0.0 for numeric traits and False for
    flags. When a trait appears more than once, the last value wins.

    Args:
        attributes: RawAttribute instances or mappings with `trait_type`
                    (or `name`) and `value` keys

    Returns:
        The canonical trait record
    """
    fields: dict[str, Any] = {}
    extensions: dict[str, Any] = {}

    for entry in attributes:
        attribute = _as_attribute(entry)
        if attribute is None or not attribute.name or "value" not in attribute.model_fields_set:
            continue

        key = resolve_trait_key(attribute.name)
        if key in NUMERIC_TRAITS:
            fields[key] = coerce_number(attribute.value)
        elif key in BOOLEAN_TRAITS:
            fields[key] = coerce_flag(attribute.value)
        elif key == "hat_type":
            fields[key] = attribute.value
        else:
            extensions[key] = attribute.value

    return TraitRecord(**fields, extensions=extensions)


def normalize_mapping(traits: Mapping[str, Any]) -> TraitRecord:
    """
    Normalize a flat `{name: value}` mapping.

    Keys may be display names or canonical keys; both resolve the same way.
    """
    return normalize({"name": name, "value": value} for name, value in traits.items())


def normalize_metadata(document: Mapping[str, Any] | BaseModel) -> TraitRecord:
    """
    Normalize a whole metadata document.

    Uses the `attributes` list when the document has one. Otherwise the
    document is read as a flat trait mapping: its `traits` entry if set,
    else the document itself.
    """
    if isinstance(document, BaseModel):
        document = document.model_dump(exclude_unset=True)
    if not isinstance(document, Mapping):
        logger.warning(f"Metadata document is not a mapping ({type(document).__name__}), ignoring")
        return TraitRecord()

    attributes = document.get("attributes")
    if isinstance(attributes, list):
        return normalize(attributes)

    flat = document.get("traits") or document
    if not isinstance(flat, Mapping):
        logger.warning(f"Metadata traits are not a mapping ({type(flat).__name__}), ignoring")
        return TraitRecord()
    return normalize_mapping(flat)


def _as_attribute(entry: Any) -> RawAttribute | None:
    """Convert an input entry to a RawAttribute, or None if it is unusable."""
    if isinstance(entry, RawAttribute):
        return entry
    if not isinstance(entry, Mapping):
        logger.debug(f"Skipping attribute entry of type {type(entry).__name__}")
        return None
    try:
        return RawAttribute.model_validate(entry)
    except ValidationError as e:
        logger.debug(f"Skipping malformed attribute entry {entry!r}: {e.error_count()} error(s)")
        return None
