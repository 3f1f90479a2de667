"""
Term registry service - business logic for calendar terms (periods)

Names are normalized by trimming; a calendar never holds two terms with the
same normalized name. Adds and bulk upserts rename a matching term in place
instead of inserting a duplicate, and never delete.
"""
import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from academic_calendar.core.errors import (
    CrossCalendarAccessError,
    DuplicateNameError,
    EmptyNameError,
    InvalidClassCountError,
    InvalidHolidayFlagError,
    InvalidOrderError,
    TermNotFoundError,
)
from academic_calendar.models.term import CalendarTerm, HolidayFlag
from academic_calendar.services.calendar_service import require_calendar
from academic_calendar.utils.collation import collation_key, order_key
from academic_calendar.utils.datetime_utils import now_utc
from academic_calendar.utils.enums import holiday_flag_to_code, normalize_holiday_flag

logger = logging.getLogger(__name__)


def normalize_name(name: Optional[str]) -> str:
    return (name or "").strip()


def finite_or_none(value) -> Optional[float]:
    """Return value if it is a finite number, else None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    return None


def _clean_short_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def sanitize_term(term: CalendarTerm) -> Optional[Dict[str, Any]]:
    """
    Read-side view of a stored term

    Returns None for terms whose name is blank. Non-finite numbers and blank
    short names are dropped and the holiday flag is normalized.
    """
    name = normalize_name(term.name)
    if not name:
        return None
    return {
        "id": term.id,
        "calendar_id": term.calendar_id,
        "name": name,
        "order": finite_or_none(term.order),
        "short_name": _clean_short_name(term.short_name),
        "class_count": finite_or_none(term.class_count),
        "holiday_flag": normalize_holiday_flag(term.holiday_flag),
    }


def term_sort_key(entry: Dict[str, Any]):
    return (order_key(entry["order"]), collation_key(entry["name"]))


def _calendar_terms(db: Session, calendar_id: int) -> List[CalendarTerm]:
    return db.query(CalendarTerm).filter(CalendarTerm.calendar_id == calendar_id).all()


def _next_order(terms: Iterable[CalendarTerm]) -> int:
    """max(existing finite orders, 0) + 1"""
    current_max = 0
    for term in terms:
        value = finite_or_none(term.order)
        if value is not None:
            current_max = max(current_max, value)
    return int(current_max) + 1


def _new_term(calendar_id: int, name: str, order: int, **fields) -> CalendarTerm:
    now = now_utc()
    holiday_flag = fields.pop("holiday_flag", None) or HolidayFlag.TEACHING
    return CalendarTerm(
        calendar_id=calendar_id,
        name=name,
        order=order,
        holiday_flag=holiday_flag_to_code(holiday_flag),
        created_at=now,
        updated_at=now,
        **fields
    )


def list_terms(db: Session, calendar_id: int) -> List[Dict[str, Any]]:
    """
    List sanitized terms of a calendar

    Sorted by order (missing orders last), then by name collation.
    """
    sanitized = [entry for entry in (sanitize_term(t) for t in _calendar_terms(db, calendar_id)) if entry]
    return sorted(sanitized, key=term_sort_key)


def get_term(db: Session, term_id: int) -> Optional[CalendarTerm]:
    """Get a term by ID"""
    return db.query(CalendarTerm).filter(CalendarTerm.id == term_id).first()


def require_calendar_term(db: Session, calendar_id: int, term_id: int) -> CalendarTerm:
    """
    Get a term owned by the calendar

    Raises:
        TermNotFoundError: If the term does not exist
        CrossCalendarAccessError: If the term belongs to another calendar
    """
    term = get_term(db, term_id)
    if not term:
        raise TermNotFoundError(f"Term with id {term_id} not found")
    if term.calendar_id != calendar_id:
        raise CrossCalendarAccessError(
            f"Term {term_id} does not belong to calendar {calendar_id}"
        )
    return term


def add_term(db: Session, calendar_id: int, term_name: str) -> Tuple[Dict[str, Any], bool]:
    """
    Add a term by name, or merge into the existing term with the same normalized name

    Args:
        db: Database session
        calendar_id: Calendar ID
        term_name: Raw term name

    Returns:
        (sanitized term, added) where added is False when an existing term was reused

    Raises:
        EmptyNameError: If the name is blank
        CalendarNotFoundError: If the calendar does not exist
    """
    normalized = normalize_name(term_name)
    if not normalized:
        raise EmptyNameError("Term name must not be empty")
    require_calendar(db, calendar_id)

    existing_terms = _calendar_terms(db, calendar_id)
    existing = next((t for t in existing_terms if normalize_name(t.name) == normalized), None)

    if existing:
        if existing.name != normalized:
            existing.name = normalized
            existing.updated_at = now_utc()
            db.commit()
            db.refresh(existing)
            logger.info("Renamed term id=%s to %r in calendar %s", existing.id, normalized, calendar_id)
        return sanitize_term(existing), False

    term = _new_term(calendar_id, normalized, _next_order(existing_terms))
    db.add(term)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent add of the same name; reuse the winner
        db.rollback()
        winner = db.query(CalendarTerm).filter(
            CalendarTerm.calendar_id == calendar_id,
            CalendarTerm.name == normalized
        ).first()
        if not winner:
            raise
        return sanitize_term(winner), False
    db.refresh(term)
    logger.info("Added term id=%s %r to calendar %s", term.id, normalized, calendar_id)
    return sanitize_term(term), True


def remove_term(db: Session, calendar_id: int, term_id: int) -> bool:
    """
    Delete a term owned by the calendar

    Returns:
        True if deleted; False if the term is absent or belongs to another calendar
    """
    term = get_term(db, term_id)
    if not term or term.calendar_id != calendar_id:
        return False
    db.delete(term)
    db.commit()
    logger.info("Removed term id=%s from calendar %s", term_id, calendar_id)
    return True


def bulk_upsert_terms(db: Session, calendar_id: int, term_names: List[str]) -> int:
    """
    Insert-or-rename terms by name, in order

    Blank names are skipped. Matching terms are renamed to the normalized name
    when it differs; other names are inserted with the next sequential order.

    Returns:
        Number of terms inserted (renames are not counted)
    """
    require_calendar(db, calendar_id)
    existing_terms = _calendar_terms(db, calendar_id)
    existing_by_name = {normalize_name(t.name): t for t in existing_terms}
    next_order = _next_order(existing_terms)

    added = 0
    for raw_name in term_names:
        normalized = normalize_name(raw_name)
        if not normalized:
            continue

        existing = existing_by_name.get(normalized)
        if existing:
            if existing.name != normalized:
                existing.name = normalized
                existing.updated_at = now_utc()
            continue

        term = _new_term(calendar_id, normalized, next_order)
        db.add(term)
        existing_by_name[normalized] = term
        next_order += 1
        added += 1

    db.commit()
    if added:
        logger.info("Bulk upsert added %d terms to calendar %s", added, calendar_id)
    return added


def _validated_order(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidOrderError("order must be a finite number")
    truncated = math.trunc(value)
    if truncated < 0:
        raise InvalidOrderError("order must be 0 or greater")
    return truncated


def _validated_class_count(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise InvalidClassCountError("class_count must be 0 or greater")
    return math.trunc(value)


def _validated_holiday_flag(value) -> HolidayFlag:
    flag = normalize_holiday_flag(value)
    if flag is None:
        raise InvalidHolidayFlagError(f"Invalid holiday_flag: {value!r}")
    return flag


def update_term(db: Session, calendar_id: int, term_id: int, patch: Dict[str, Any]) -> bool:
    """
    Patch a term

    Each key present in patch sets the field; a None value clears it (except
    name, which cannot be cleared). Keys absent from patch are untouched.

    Args:
        db: Database session
        calendar_id: Calendar ID
        term_id: Term ID
        patch: Subset of name, order, short_name, class_count, holiday_flag

    Returns:
        True if anything changed, False for a no-op patch

    Raises:
        TermNotFoundError, CrossCalendarAccessError, EmptyNameError,
        DuplicateNameError, InvalidOrderError, InvalidClassCountError,
        InvalidHolidayFlagError
    """
    term = require_calendar_term(db, calendar_id, term_id)
    updates: Dict[str, Any] = {}

    if "name" in patch:
        normalized = normalize_name(patch["name"])
        if not normalized:
            raise EmptyNameError("Term name must not be empty")
        if normalized != term.name:
            duplicate = next(
                (
                    t for t in _calendar_terms(db, calendar_id)
                    if t.id != term.id and normalize_name(t.name) == normalized
                ),
                None
            )
            if duplicate:
                raise DuplicateNameError(f"A term named {normalized!r} already exists in this calendar")
            updates["name"] = normalized

    if "order" in patch:
        value = None if patch["order"] is None else _validated_order(patch["order"])
        if value != term.order:
            updates["order"] = value

    if "short_name" in patch:
        value = _clean_short_name(patch["short_name"])
        if value != term.short_name:
            updates["short_name"] = value

    if "class_count" in patch:
        value = None if patch["class_count"] is None else _validated_class_count(patch["class_count"])
        if value != term.class_count:
            updates["class_count"] = value

    if "holiday_flag" in patch:
        value = None if patch["holiday_flag"] is None else _validated_holiday_flag(patch["holiday_flag"])
        if value != normalize_holiday_flag(term.holiday_flag):
            updates["holiday_flag"] = holiday_flag_to_code(value)

    if not updates:
        return False

    for field, value in updates.items():
        setattr(term, field, value)
    term.updated_at = now_utc()
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateNameError(f"A term named {updates.get('name')!r} already exists in this calendar")

    logger.info("Updated term id=%s fields=%s", term_id, sorted(updates))
    return True


def upsert_preset_terms(db: Session, calendar_id: int, presets: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Apply a preset list of terms (name, short_name, holiday_flag)

    Matching terms are patched only where name, short name or holiday flag
    actually differ; unmatched presets are inserted with the next order.

    Returns:
        {"added": int, "updated": int}

    Raises:
        InvalidHolidayFlagError: If a preset carries an unrecognized flag (nothing is written)
    """
    require_calendar(db, calendar_id)

    prepared = []
    for preset in presets:
        normalized = normalize_name(preset.get("name"))
        if not normalized:
            continue
        raw_flag = preset.get("holiday_flag")
        flag = None if raw_flag is None else _validated_holiday_flag(raw_flag)
        prepared.append((normalized, _clean_short_name(preset.get("short_name")), flag))

    existing_terms = _calendar_terms(db, calendar_id)
    existing_by_name = {normalize_name(t.name): t for t in existing_terms}
    next_order = _next_order(existing_terms)

    added = 0
    updated = 0
    now = now_utc()
    for name, short_name, flag in prepared:
        existing = existing_by_name.get(name)
        if existing:
            changed = False
            if existing.name != name:
                existing.name = name
                changed = True
            if _clean_short_name(existing.short_name) != short_name:
                existing.short_name = short_name
                changed = True
            if normalize_holiday_flag(existing.holiday_flag) != flag:
                existing.holiday_flag = holiday_flag_to_code(flag)
                changed = True
            if changed:
                existing.updated_at = now
                updated += 1
            continue

        term = _new_term(calendar_id, name, next_order, short_name=short_name, holiday_flag=flag)
        db.add(term)
        existing_by_name[name] = term
        next_order += 1
        added += 1

    db.commit()
    logger.info("Preset upsert on calendar %s: added=%d updated=%d", calendar_id, added, updated)
    return {"added": added, "updated": updated}


def seed_terms(db: Session, calendar_id: int, terms: List[Dict[str, Any]]) -> int:
    """
    Insert the initial terms of a new calendar (no commit)

    Terms are sanitized, sorted by (order, name), de-duplicated by name, and
    given a running fallback order where none was supplied.

    Returns:
        Number of terms inserted
    """
    sanitized = []
    for raw in terms:
        name = normalize_name(raw.get("name"))
        if not name:
            continue
        order = finite_or_none(raw.get("order"))
        class_count = finite_or_none(raw.get("class_count"))
        sanitized.append({
            "name": name,
            "order": math.trunc(order) if order is not None and order >= 0 else None,
            "short_name": _clean_short_name(raw.get("short_name")),
            "class_count": math.trunc(class_count) if class_count is not None and class_count >= 0 else None,
            "holiday_flag": normalize_holiday_flag(raw.get("holiday_flag")),
        })
    sanitized.sort(key=term_sort_key)

    seen = set()
    fallback_order = 1
    for entry in sanitized:
        if entry["name"] in seen:
            continue
        seen.add(entry["name"])
        resolved_order = entry["order"] if entry["order"] is not None else fallback_order
        fallback_order = max(fallback_order, resolved_order + 1)
        db.add(_new_term(
            calendar_id,
            entry["name"],
            resolved_order,
            short_name=entry["short_name"],
            class_count=entry["class_count"],
            holiday_flag=entry["holiday_flag"],
        ))
    db.flush()
    return len(seen)
