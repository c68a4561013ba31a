import json
import re
from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta
from pydantic import TypeAdapter, ValidationError

from perkcycle.domain.errors import ConfigurationError, UnsupportedCycleError
from perkcycle.domain.models import (
    CycleDefinition,
    CycleType,
    CycleWindow,
    MultipleWindowsCycle,
    SingleCycle,
)

# Cycle ends are inclusive dates; reset dates are the first day of the next cycle.
# One-time and per-trip benefits have no natural cycle and use NEVER_EXPIRES for both.
NEVER_EXPIRES = date(2099, 12, 31)

_NO_CYCLE = (CycleType.ONE_TIME, CycleType.PER_TRIP)

_definition_adapter = TypeAdapter(CycleDefinition)

_MONTH_DAY = re.compile(r"(\d{2})-(\d{2})", re.ASCII)


def parse_cycle_type(raw: CycleType | str) -> CycleType:
    if isinstance(raw, CycleType):
        return raw
    if raw is None:
        raise ConfigurationError("Cycle type is required.")
    try:
        return CycleType(raw)
    except (ValueError, TypeError) as exc:
        raise UnsupportedCycleError(f"Unsupported cycle type: {raw!r}") from exc


def parse_cycle_definition(raw) -> SingleCycle | MultipleWindowsCycle:
    # JSON string from the store, a decoded mapping, or an already typed definition.
    if isinstance(raw, (SingleCycle, MultipleWindowsCycle)):
        return raw
    if raw is None:
        raise ConfigurationError("Cycle definition is required.")

    data = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Cycle definition is not valid JSON: {exc}") from exc

    try:
        return _definition_adapter.validate_python(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid cycle definition: {exc}") from exc


def parse_card_anniversary(raw: str | None) -> tuple[int, int]:
    if not raw:
        raise ConfigurationError("Card renewal month/day required for CARDMEMBER_YEAR cycle.")
    if not isinstance(raw, str):
        raise ConfigurationError(f"Card renewal month/day must be an 'MM-DD' string, got {raw!r}.")

    match = _MONTH_DAY.fullmatch(raw.strip())
    if match is None:
        raise ConfigurationError(f"Card renewal month/day must look like 'MM-DD', got {raw!r}.")

    month, day = int(match.group(1)), int(match.group(2))
    try:
        date(2000, month, day)
    except ValueError as exc:
        raise ConfigurationError(f"Card renewal month/day is out of range: {raw!r}.") from exc
    return month, day


def _as_date(reference_date: date | datetime) -> date:
    if isinstance(reference_date, datetime):
        return reference_date.date()
    return reference_date


def _on(year: int, month: int, day: int) -> date:
    # relativedelta clamps the day, so Feb 29 lands on Feb 28 in non-leap years.
    return date(year, 1, 1) + relativedelta(month=month, day=day)


def _window_bounds(window: CycleWindow, year: int) -> tuple[date, date]:
    return (
        _on(year, window.start_month, window.start_day),
        _on(year, window.end_month, window.end_day),
    )


def _require_windows(definition) -> tuple[CycleWindow, ...]:
    if not isinstance(definition, MultipleWindowsCycle) or not definition.windows:
        raise ConfigurationError("Windows required for SEMIANNUAL_CALENDAR cycle.")
    return definition.windows


def _containing_window(ref: date, windows: tuple[CycleWindow, ...]) -> tuple[date, date] | None:
    for window in windows:
        start, end = _window_bounds(window, ref.year)
        if start <= ref <= end:
            return start, end
    return None


def _upcoming_window(ref: date, windows: tuple[CycleWindow, ...]) -> tuple[date, date]:
    # First window starting strictly after ref this year, else next year's first window.
    for window in windows:
        start, end = _window_bounds(window, ref.year)
        if start > ref:
            return start, end
    return _window_bounds(windows[0], ref.year + 1)


def _next_anniversary(ref: date, card_anniversary: str | None) -> date:
    month, day = parse_card_anniversary(card_anniversary)
    this_year = _on(ref.year, month, day)
    # On the anniversary itself the ending cycle is still current.
    if this_year >= ref:
        return this_year
    return _on(ref.year + 1, month, day)


def resolve_current_cycle_end(
    cycle_type: CycleType | str,
    cycle_definition,
    reference_date: date | datetime,
    card_anniversary: str | None = None,
) -> date:
    cycle_type = parse_cycle_type(cycle_type)
    definition = parse_cycle_definition(cycle_definition)
    ref = _as_date(reference_date)

    if cycle_type == CycleType.MONTHLY:
        return ref + relativedelta(day=31)

    if cycle_type == CycleType.CALENDAR_YEAR:
        return date(ref.year, 12, 31)

    if cycle_type == CycleType.CARDMEMBER_YEAR:
        return _next_anniversary(ref, card_anniversary)

    if cycle_type == CycleType.SEMIANNUAL_CALENDAR:
        windows = _require_windows(definition)
        current = _containing_window(ref, windows)
        if current:
            return current[1]
        return _upcoming_window(ref, windows)[1]

    if cycle_type in _NO_CYCLE:
        return NEVER_EXPIRES

    raise UnsupportedCycleError(f"Unsupported cycle type: {cycle_type!r}")


def resolve_next_reset_date(
    cycle_type: CycleType | str,
    cycle_definition,
    reference_date: date | datetime,
    card_anniversary: str | None = None,
) -> date:
    cycle_type = parse_cycle_type(cycle_type)
    definition = parse_cycle_definition(cycle_definition)
    ref = _as_date(reference_date)

    if cycle_type == CycleType.MONTHLY:
        return ref.replace(day=1) + relativedelta(months=1)

    if cycle_type == CycleType.CALENDAR_YEAR:
        return date(ref.year + 1, 1, 1)

    if cycle_type == CycleType.CARDMEMBER_YEAR:
        return _next_anniversary(ref, card_anniversary) + timedelta(days=1)

    if cycle_type == CycleType.SEMIANNUAL_CALENDAR:
        windows = _require_windows(definition)
        return _upcoming_window(ref, windows)[0]

    if cycle_type in _NO_CYCLE:
        return NEVER_EXPIRES

    raise UnsupportedCycleError(f"Unsupported cycle type: {cycle_type!r}")


def resolve_current_cycle_start(
    cycle_type: CycleType | str,
    cycle_definition,
    reference_date: date | datetime,
    card_anniversary: str | None = None,
) -> date | None:
    """Return the first day of the cycle ending at resolve_current_cycle_end.

    None means the cycle has no lower bound (one-time and per-trip benefits).
    In a gap between semiannual windows this is the upcoming window's start,
    which lies after reference_date.
    """
    cycle_type = parse_cycle_type(cycle_type)
    definition = parse_cycle_definition(cycle_definition)
    ref = _as_date(reference_date)

    if cycle_type == CycleType.MONTHLY:
        return ref.replace(day=1)

    if cycle_type == CycleType.CALENDAR_YEAR:
        return date(ref.year, 1, 1)

    if cycle_type == CycleType.CARDMEMBER_YEAR:
        month, day = parse_card_anniversary(card_anniversary)
        end = _next_anniversary(ref, card_anniversary)
        return _on(end.year - 1, month, day) + timedelta(days=1)

    if cycle_type == CycleType.SEMIANNUAL_CALENDAR:
        windows = _require_windows(definition)
        current = _containing_window(ref, windows)
        if current:
            return current[0]
        return _upcoming_window(ref, windows)[0]

    if cycle_type in _NO_CYCLE:
        return None

    raise UnsupportedCycleError(f"Unsupported cycle type: {cycle_type!r}")
