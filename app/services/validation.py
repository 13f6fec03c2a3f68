"""
Validation and consistency pipeline for catalog writes.

Every create/update of a Restaurant, FoodItem or Review goes through the same
sequence of checks before the store is touched:

1. existence of the target record (update only)
2. required fields present and non-blank
3. range-checked fields inside their inclusive bounds
4. reference fields pointing at records that exist

The behaviour of each entity kind is described by an ``EntityRules``
instance; the pipeline itself knows nothing about restaurants or reviews.

Updates are presence-tagged: the ``changes`` mapping contains exactly the
fields the client supplied, so a supplied ``0`` is a value and an omitted
field keeps what is stored.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.services.base import AsyncBaseService


@dataclass(frozen=True)
class EntityRules:
    """Per-kind metadata driving the pipeline."""

    kind: str
    store: AsyncBaseService
    required: Tuple[str, ...] = ()
    references: Mapping[str, AsyncBaseService] = field(default_factory=dict)
    ranges: Mapping[str, Tuple[int, int]] = field(default_factory=dict)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _format_required(names) -> str:
    names = list(names)
    if len(names) == 1:
        return f"{names[0]} is required."
    return f"{', '.join(names[:-1])} and {names[-1]} are required."


def _label(field_name: str) -> str:
    return field_name.replace("_", " ").capitalize()


def check_required(rules: EntityRules, values: Mapping[str, Any], *, partial: bool = False) -> None:
    """
    Reject absent or blank mandatory fields.

    With ``partial`` set (updates) only the required fields that were
    supplied are checked: they may be left out, but not blanked.
    """
    if partial:
        missing = [name for name in rules.required if name in values and _is_blank(values[name])]
    else:
        missing = [name for name in rules.required if _is_blank(values.get(name))]

    if missing:
        raise ValidationError(_format_required(missing))


def check_ranges(rules: EntityRules, values: Mapping[str, Any]) -> None:
    for name, (low, high) in rules.ranges.items():
        if name not in values or values[name] is None:
            continue
        if not low <= values[name] <= high:
            raise ValidationError(f"{_label(name)} must be between {low} and {high}.")


async def check_references(
    db: AsyncSession,
    rules: EntityRules,
    values: Mapping[str, Any],
    existing: Optional[Any] = None,
) -> None:
    """
    Resolve every supplied reference field against its target store.

    On update, a reference equal to the stored one is not looked up again.
    """
    for name, target in rules.references.items():
        if name not in values or values[name] is None:
            continue

        value = values[name]
        if existing is not None and getattr(existing, name) == value:
            continue

        if await target.get(db, value) is None:
            prefix = "New " if existing is not None else ""
            raise NotFoundError(target.kind, f"{prefix}{target.kind.lower()} not found.".capitalize())


async def validate_create(db: AsyncSession, rules: EntityRules, fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Run the create checks and return the values to insert.

    Raises:
        ValidationError: missing/blank required field or out-of-range value
        NotFoundError: a reference points at a missing record
    """
    check_required(rules, fields)
    check_ranges(rules, fields)
    await check_references(db, rules, fields)
    return dict(fields)


async def load_existing(db: AsyncSession, rules: EntityRules, id: Any) -> Any:
    """Existence check for update/delete."""
    return await rules.store.get_or_404(db, id)


async def validate_update(
    db: AsyncSession,
    rules: EntityRules,
    existing: Any,
    changes: Mapping[str, Any],
) -> Dict[str, Any]:
    """
    Run the update checks against an already loaded record.

    Returns the presence-tagged changes to apply; fields not in ``changes``
    keep their stored value.
    """
    check_required(rules, changes, partial=True)
    check_ranges(rules, changes)
    await check_references(db, rules, changes, existing=existing)
    return dict(changes)
