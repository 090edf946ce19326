"""
Canonical display formatters for view counts and publish dates.

These are the single source of truth for the labels shown to users. The
extractor calls ``normalize_view_count_text`` and
``normalize_published_display`` exactly once per record, after every field
cascade has run, so no raw JSON fragment ever reaches the display fields.

Labels are produced in English (``"en"``) or Turkish (``"tr"``).
"""

from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta, timezone

from tubemeta.services.extraction.normalizers import approx_number, digits_only

_ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_VIEWS_SUFFIX: dict[str, str] = {"en": "views", "tr": "görüntülenme"}

# (singular, plural) per unit and language
_UNIT_LABELS: dict[str, dict[str, tuple[str, str]]] = {
    "en": {
        "year": ("year", "years"),
        "month": ("month", "months"),
        "week": ("week", "weeks"),
        "day": ("day", "days"),
        "hour": ("hour", "hours"),
        "minute": ("minute", "minutes"),
    },
    "tr": {
        "year": ("yıl", "yıl"),
        "month": ("ay", "ay"),
        "week": ("hafta", "hafta"),
        "day": ("gün", "gün"),
        "hour": ("saat", "saat"),
        "minute": ("dakika", "dakika"),
    },
}

_JUST_NOW: dict[str, str] = {"en": "Just now", "tr": "Az önce"}

# Whole-word unit tokens across the locales YouTube serves. Matching whole
# words keeps Turkish "ay" (month) from matching inside English "days".
_RELATIVE_UNIT_TOKENS: tuple[tuple[str, frozenset[str]], ...] = (
    (
        "year",
        frozenset({
            "yıl", "year", "years", "yr", "yrs", "jahr", "jahre", "jahren",
            "año", "años", "ano", "anos", "an", "ans", "année", "années",
            "anno", "anni", "jaar", "jaren", "rok", "lata", "lat",
            "год", "года", "лет", "سنة", "سنوات", "عام", "أعوام", "年",
        }),
    ),
    (
        "month",
        frozenset({
            "ay", "month", "months", "monat", "monate", "monaten",
            "mes", "meses", "mois", "mese", "mesi", "miesiąc", "miesiące",
            "miesiecy", "месяц", "месяца", "месяцев", "شهر", "أشهر", "月",
        }),
    ),
    (
        "week",
        frozenset({
            "hafta", "week", "weeks", "woche", "wochen", "semana", "semanas",
            "semaine", "semaines", "settimana", "settimane",
            "неделя", "недели", "недель", "週間", "周",
        }),
    ),
    (
        "day",
        frozenset({
            "gün", "day", "days", "tag", "tagen", "día", "días", "jour",
            "jours", "giorno", "giorni", "день", "дня", "дней", "日", "天",
        }),
    ),
    (
        "hour",
        frozenset({
            "saat", "hour", "hours", "stunde", "stunden", "hora", "horas",
            "heure", "heures", "ora", "ore", "час", "часа", "часов", "時", "小时",
        }),
    ),
    (
        "minute",
        frozenset({
            "dakika", "minute", "minutes", "min", "minuten", "minuto",
            "minuti", "minutos", "минута", "минуты", "минут", "分", "分钟",
        }),
    ),
)

_MONTHS: dict[str, int] = {
    # English
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6, "jul": 7,
    "july": 7, "aug": 8, "august": 8, "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10, "nov": 11, "november": 11, "dec": 12,
    "december": 12,
    # Turkish
    "oca": 1, "ocak": 1, "şub": 2, "şubat": 2, "mart": 3, "nis": 4,
    "nisan": 4, "mayıs": 5, "haz": 6, "haziran": 6, "tem": 7, "temmuz": 7,
    "ağu": 8, "ağustos": 8, "eyl": 9, "eylül": 9, "eki": 10, "ekim": 10,
    "kas": 11, "kasım": 11, "ara": 12, "aralık": 12,
}

# "Sep 11, 2025" / "September 11, 2025"
_MONTH_DAY_YEAR_RE = re.compile(r"([^\W\d_]+)\.?\s+(\d{1,2}),?\s+(\d{4})")
# "11 Eyl 2025" / "11 Eylül 2025"
_DAY_MONTH_YEAR_RE = re.compile(r"(\d{1,2})\.?\s+([^\W\d_]+)\.?\s+(\d{4})")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_WORD_RE = re.compile(r"[^\W\d_]+")
_INT_RE = re.compile(r"\d+")


def _language(language: str) -> str:
    return language if language in _VIEWS_SUFFIX else "en"


def _abbreviate(count: int) -> str:
    d = float(count)
    if count >= 1_000_000_000:
        return f"{d / 1_000_000_000:.0f}B" if d >= 10_000_000_000 else f"{d / 1_000_000_000:.1f}B"
    if count >= 1_000_000:
        return f"{d / 1_000_000:.0f}M" if d >= 10_000_000 else f"{d / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{d / 1_000:.0f}K" if d >= 10_000 else f"{d / 1_000:.1f}K"
    return str(count)


def format_view_count(count: int | str, language: str = "en") -> str:
    """
    Format a view count as a display label.

    Parameters
    ----------
    count : int | str
        The count, or its decimal string. Non-numeric strings (placeholders)
        are returned unchanged.
    language : str, optional
        ``"en"`` or ``"tr"`` (default ``"en"``).

    Returns
    -------
    str
        E.g. ``"987 views"``, ``"1.2K views"``, ``"45M views"``.
    """
    if isinstance(count, str):
        if not count.strip().isdigit():
            return count
        count = int(count.strip())
    return f"{_abbreviate(count)} {_VIEWS_SUFFIX[_language(language)]}"


def format_count_short(count: int | str) -> str:
    """Abbreviate a count without suffix (``987``, ``1.2K``, ``3.4M``)."""
    if isinstance(count, str):
        if not count.strip().isdigit():
            return "0"
        count = int(count.strip())
    return _abbreviate(count)


def normalize_view_count_text(raw: str, language: str = "en") -> str:
    """
    Normalize any raw view count capture into the canonical label.

    Approximate parsing is preferred (``"1.2K"``, ``"3,4M"``), then a
    digits-only reading, then the trimmed text is passed through.

    Parameters
    ----------
    raw : str
        Raw view count text.
    language : str, optional
        Display language (default ``"en"``).

    Returns
    -------
    str
        The display label, or ``""`` for blank input.
    """
    trimmed = raw.strip()
    if not trimmed:
        return ""
    approx = approx_number(trimmed)
    if approx is not None:
        return format_view_count(approx, language)
    digits = digits_only(trimmed)
    return format_view_count(digits if digits else trimmed, language)


def _reference(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _to_iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime(_ISO_FORMAT)


def _valid_date(year: int, month: int, day: int) -> datetime | None:
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None


def absolute_date_to_iso(raw: str) -> str | None:
    """
    Convert an absolute date string to an ISO8601 timestamp at UTC midnight.

    Supports ``yyyy-MM-dd`` prefixes, English ``"Sep 11, 2025"`` /
    ``"September 11, 2025"`` and Turkish ``"11 Eyl 2025"`` /
    ``"11 Eylül 2025"``, also when embedded in longer labels such as
    ``"Premiered Sep 11, 2025"``.

    Parameters
    ----------
    raw : str
        Date text.

    Returns
    -------
    str | None
        ``"YYYY-MM-DDT00:00:00Z"``, or ``None`` if not recognized.
    """
    trimmed = raw.strip()
    if not trimmed:
        return None

    iso = _ISO_DATE_RE.match(trimmed)
    if iso:
        parsed = _valid_date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))
        return _to_iso(parsed) if parsed else None

    lower = trimmed.lower()
    for match in _MONTH_DAY_YEAR_RE.finditer(lower):
        month = _MONTHS.get(match.group(1))
        if month:
            parsed = _valid_date(int(match.group(3)), month, int(match.group(2)))
            if parsed:
                return _to_iso(parsed)
    for match in _DAY_MONTH_YEAR_RE.finditer(lower):
        month = _MONTHS.get(match.group(2))
        if month:
            parsed = _valid_date(int(match.group(3)), month, int(match.group(1)))
            if parsed:
                return _to_iso(parsed)
    return None


def _shift_months(moment: datetime, months: int) -> datetime:
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    day = min(moment.day, calendar.monthrange(year, month + 1)[1])
    return moment.replace(year=year, month=month + 1, day=day)


def relative_string_to_iso(raw: str, now: datetime | None = None) -> str | None:
    """
    Convert a localized relative time (``"5 days ago"``, ``"3 yıl önce"``,
    ``"vor 2 Jahren"``) to an ISO8601 timestamp.

    Parameters
    ----------
    raw : str
        Relative time text.
    now : datetime | None, optional
        Reference time (default: current UTC time).

    Returns
    -------
    str | None
        The ISO timestamp, or ``None`` if no positive amount or known unit
        is found.
    """
    lower = raw.strip().lower()
    if not lower:
        return None
    amount_match = _INT_RE.search(lower)
    if not amount_match:
        return None
    amount = int(amount_match.group(0))
    if amount <= 0:
        return None

    words = set(_WORD_RE.findall(lower))
    unit = next(
        (name for name, tokens in _RELATIVE_UNIT_TOKENS if words & tokens), None
    )
    if unit is None:
        return None

    reference = _reference(now)
    if unit == "year":
        moment = _shift_months(reference, -12 * amount)
    elif unit == "month":
        moment = _shift_months(reference, -amount)
    elif unit == "week":
        moment = reference - timedelta(weeks=amount)
    elif unit == "day":
        moment = reference - timedelta(days=amount)
    elif unit == "hour":
        moment = reference - timedelta(hours=amount)
    else:
        moment = reference - timedelta(minutes=amount)
    return _to_iso(moment)


def _whole_months_between(start: datetime, end: datetime) -> int:
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and _shift_months(start, months) > end:
        months -= 1
    return max(months, 0)


def format_relative_date(
    iso: str, now: datetime | None = None, language: str = "en"
) -> str:
    """
    Format an ISO8601 timestamp as a relative label (``"3 years ago"``).

    Parameters
    ----------
    iso : str
        Timestamp in ``YYYY-MM-DDTHH:MM:SSZ`` form. Other strings are
        returned unchanged.
    now : datetime | None, optional
        Reference time (default: current UTC time).
    language : str, optional
        Display language (default ``"en"``).

    Returns
    -------
    str
        The relative label, or ``"Just now"`` for future or sub-minute
        timestamps.
    """
    try:
        moment = datetime.strptime(iso, _ISO_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return iso

    lang = _language(language)
    reference = _reference(now)

    def ago(value: int, unit: str) -> str:
        singular, plural = _UNIT_LABELS[lang][unit]
        if lang == "tr":
            return f"{value} {singular} önce"
        return f"{value} {singular if value == 1 else plural} ago"

    months = _whole_months_between(moment, reference)
    if months >= 12:
        return ago(months // 12, "year")
    if months > 0:
        return ago(months, "month")

    delta = reference - moment
    if delta.total_seconds() <= 0:
        return _JUST_NOW[lang]
    if delta.days >= 7:
        return ago(delta.days // 7, "week")
    if delta.days > 0:
        return ago(delta.days, "day")
    if delta.seconds >= 3600:
        return ago(delta.seconds // 3600, "hour")
    if delta.seconds >= 60:
        return ago(delta.seconds // 60, "minute")
    return _JUST_NOW[lang]


def normalize_published_display(
    raw: str,
    iso: str | None = None,
    now: datetime | None = None,
    language: str = "en",
) -> tuple[str, str | None]:
    """
    Normalize a raw publish date capture into the canonical label.

    Resolution order: a known ISO timestamp, an absolute date, a relative
    date; unrecognized text is passed through trimmed.

    Parameters
    ----------
    raw : str
        Raw date text (``"2021-06-15"``, ``"Sep 11, 2025"``,
        ``"5 days ago"``, ...).
    iso : str | None, optional
        An already-known ISO timestamp, which takes precedence.
    now : datetime | None, optional
        Reference time for relative labels.
    language : str, optional
        Display language (default ``"en"``).

    Returns
    -------
    tuple[str, str | None]
        The display label and the ISO timestamp, if one was resolved.
    """
    if iso:
        return format_relative_date(iso, now, language), iso
    trimmed = raw.strip()
    if not trimmed:
        return "", None
    absolute = absolute_date_to_iso(trimmed)
    if absolute:
        return format_relative_date(absolute, now, language), absolute
    relative = relative_string_to_iso(trimmed, now)
    if relative:
        return format_relative_date(relative, now, language), relative
    return trimmed, None
