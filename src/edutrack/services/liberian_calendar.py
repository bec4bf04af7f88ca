"""
Liberian academic calendar.

National holidays, cultural events and the three-term school year used by
Liberian schools. Everything here is pure date arithmetic; importing the
generated events into the ``events`` table happens in
``edutrack.services.events``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable, Optional

EASTER_MINUS_2 = "easter-2"


@dataclass(frozen=True)
class LiberianHoliday:
    id: str
    name: str
    date: str  # "MM-DD", or EASTER_MINUS_2 for Good Friday
    description: str
    cultural_significance: str
    educational_activities: tuple[str, ...]
    is_national_holiday: bool
    category: str  # national | cultural | educational | religious | community


@dataclass(frozen=True)
class AcademicTerm:
    term_number: int
    name: str
    start_month: int
    end_month: int
    description: str
    key_activities: tuple[str, ...] = field(default_factory=tuple)

    def contains_month(self, month: int) -> bool:
        return self.start_month <= month <= self.end_month

    def contains(self, day: date) -> bool:
        return self.contains_month(day.month)


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str
    date: date
    description: str
    category: str
    is_national_holiday: bool
    audience: Any = "all"


LIBERIAN_NATIONAL_HOLIDAYS: tuple[LiberianHoliday, ...] = (
    LiberianHoliday(
        id="independence_day",
        name="Independence Day",
        date="07-26",
        description=(
            "Celebrating Liberia's independence from the American Colonization Society in 1847, "
            "making Liberia the first African republic."
        ),
        cultural_significance=(
            "The most important national holiday, celebrating Liberian sovereignty, freedom, and "
            "national identity. A day of patriotic pride and cultural unity."
        ),
        educational_activities=(
            "Flag raising ceremonies with national anthem",
            "Historical presentations on Liberian independence",
            "Traditional Liberian storytelling sessions",
            "Cultural performances featuring Liberian music and dance",
            'Essay competitions on "What Independence Means to Me"',
            "Community service projects reflecting national unity",
        ),
        is_national_holiday=True,
        category="national",
    ),
    LiberianHoliday(
        id="thanksgiving_day",
        name="National Thanksgiving Day",
        date="11-07",
        description=(
            "A uniquely Liberian holiday established in 1883, celebrating gratitude for the "
            "nation's blessings and acknowledging God's providence."
        ),
        cultural_significance=(
            "Reflects Liberian Christian heritage and community values of gratitude, family "
            "unity, and spiritual reflection."
        ),
        educational_activities=(
            "Gratitude reflection sessions and journaling",
            "Community thanksgiving services and prayers",
            "Traditional Liberian feast preparation and sharing",
            "Storytelling about Liberian blessings and achievements",
            "Service learning projects helping community members",
            "Cultural presentations on Liberian traditions of gratitude",
        ),
        is_national_holiday=True,
        category="religious",
    ),
    LiberianHoliday(
        id="armed_forces_day",
        name="Armed Forces Day",
        date="02-11",
        description=(
            "Honoring the Armed Forces of Liberia and recognizing their service to the nation's "
            "security and peace."
        ),
        cultural_significance=(
            "Celebrates national defense, patriotism, and the role of military service in "
            "protecting Liberian sovereignty and democracy."
        ),
        educational_activities=(
            "Presentations on Liberian military history and peacekeeping",
            "Guest speakers from Armed Forces sharing service experiences",
            "Patriotic ceremonies and flag presentations",
            "Discussions on citizenship, duty, and national service",
            "Historical research projects on Liberian defense",
            "Community appreciation events for veterans and service members",
        ),
        is_national_holiday=True,
        category="national",
    ),
    LiberianHoliday(
        id="decoration_day",
        name="Decoration Day",
        date="03-12",
        description=(
            "Memorial day honoring deceased national heroes, leaders, and all Liberians who "
            "contributed to the nation's development."
        ),
        cultural_significance=(
            "A solemn day of remembrance, honoring ancestors and national heroes while "
            "reflecting on their contributions to Liberian society."
        ),
        educational_activities=(
            "Memorial services and moments of silence",
            "Historical presentations on Liberian heroes and leaders",
            "Cemetery visits and grave decoration ceremonies",
            "Biographical research projects on national figures",
            "Reflection essays on legacy and contribution",
            "Community storytelling about local heroes and elders",
        ),
        is_national_holiday=True,
        category="national",
    ),
    LiberianHoliday(
        id="unification_day",
        name="National Unification Day",
        date="05-14",
        description=(
            "Commemorating the unification of Liberia and celebrating the unity of all Liberian "
            "people regardless of ethnic or regional background."
        ),
        cultural_significance=(
            "Celebrates national unity, ethnic harmony, and the coming together of all Liberian "
            "tribes and communities as one nation."
        ),
        educational_activities=(
            "Unity celebrations featuring all ethnic groups",
            "Cultural exhibitions showcasing diverse Liberian traditions",
            "Inter-tribal friendship and cooperation activities",
            "Presentations on Liberian ethnic diversity and harmony",
            "Community unity projects and collaborative activities",
            "Traditional music and dance from various Liberian cultures",
        ),
        is_national_holiday=True,
        category="national",
    ),
    LiberianHoliday(
        id="good_friday",
        name="Good Friday",
        date=EASTER_MINUS_2,
        description=(
            "Christian holy day commemorating the crucifixion of Jesus Christ, widely observed "
            "in Christian-majority Liberia."
        ),
        cultural_significance=(
            "Reflects Liberia's strong Christian heritage and provides opportunity for spiritual "
            "reflection and community worship."
        ),
        educational_activities=(
            "Religious reflection and prayer services",
            "Community worship and spiritual gatherings",
            "Discussions on faith, sacrifice, and service",
            "Charitable activities and community service",
            "Quiet reflection and meditation periods",
            "Interfaith dialogue and understanding activities",
        ),
        is_national_holiday=True,
        category="religious",
    ),
)

LIBERIAN_CULTURAL_EVENTS: tuple[LiberianHoliday, ...] = (
    LiberianHoliday(
        id="cultural_heritage_month",
        name="Liberian Cultural Heritage Month",
        date="02-01",
        description=(
            "Month-long celebration of Liberian cultural traditions, arts, crafts, music, and "
            "ancestral wisdom."
        ),
        cultural_significance=(
            "Preserves and celebrates the rich cultural heritage of Liberia's diverse ethnic "
            "groups and traditional practices."
        ),
        educational_activities=(
            "Traditional craft workshops and demonstrations",
            "Storytelling sessions with community elders",
            "Cultural music and dance performances",
            "Traditional cooking and food culture exploration",
            "Art exhibitions featuring Liberian artists",
            "Language preservation activities for local dialects",
        ),
        is_national_holiday=False,
        category="cultural",
    ),
    LiberianHoliday(
        id="community_service_week",
        name="National Community Service Week",
        date="03-01",
        description=(
            "Week dedicated to community service, reflecting Liberian values of mutual support "
            "and collective responsibility."
        ),
        cultural_significance=(
            "Embodies traditional Liberian community values of helping neighbors and working "
            "together for common good."
        ),
        educational_activities=(
            "School and community cleanup projects",
            "Elder care and assistance programs",
            "Environmental conservation activities",
            "Literacy support for community members",
            "Health awareness and wellness programs",
            "Infrastructure improvement volunteer work",
        ),
        is_national_holiday=False,
        category="community",
    ),
    LiberianHoliday(
        id="traditional_storytelling_week",
        name="Traditional Storytelling Week",
        date="04-15",
        description=(
            "Week celebrating Liberian oral traditions, folktales, and the wisdom passed down "
            "through generations."
        ),
        cultural_significance=(
            "Preserves oral traditions and ancestral wisdom while strengthening "
            "intergenerational connections."
        ),
        educational_activities=(
            "Elder storytelling sessions with moral lessons",
            "Student storytelling competitions",
            "Recording and preserving traditional tales",
            "Dramatic presentations of folktales",
            "Creative writing inspired by traditional stories",
            "Community storytelling circles and gatherings",
        ),
        is_national_holiday=False,
        category="cultural",
    ),
    LiberianHoliday(
        id="local_language_appreciation",
        name="Local Language Appreciation Day",
        date="09-15",
        description=(
            "Celebrating Liberia's linguistic diversity and promoting the preservation of "
            "indigenous languages."
        ),
        cultural_significance=(
            "Honors the linguistic heritage of Liberia's 16 indigenous languages and promotes "
            "multilingual education."
        ),
        educational_activities=(
            "Presentations in various Liberian languages",
            "Language learning workshops and exchanges",
            "Cultural performances in indigenous languages",
            "Intergenerational language sharing sessions",
            "Documentation of local language expressions",
            "Multilingual poetry and literature appreciation",
        ),
        is_national_holiday=False,
        category="cultural",
    ),
    LiberianHoliday(
        id="harvest_celebration",
        name="Traditional Harvest Celebration",
        date="11-15",
        description="Celebrating agricultural traditions and giving thanks for the harvest season.",
        cultural_significance=(
            "Connects students to Liberia's agricultural heritage and traditional farming practices."
        ),
        educational_activities=(
            "Agricultural education and farming demonstrations",
            "Traditional food preparation and sharing",
            "Gratitude ceremonies for nature's bounty",
            "Environmental stewardship activities",
            "Traditional farming technique presentations",
            "Community garden projects and maintenance",
        ),
        is_national_holiday=False,
        category="cultural",
    ),
)

LIBERIAN_ACADEMIC_TERMS: tuple[AcademicTerm, ...] = (
    AcademicTerm(
        term_number=1,
        name="First Term",
        start_month=9,
        end_month=12,
        description="Academic year opening term with foundation building and first assessments",
        key_activities=(
            "Academic year opening ceremonies",
            "Student orientation and class assignments",
            "First term curriculum introduction",
            "Mid-term examinations (October)",
            "Parent-teacher conferences",
            "First term final examinations (December)",
        ),
    ),
    AcademicTerm(
        term_number=2,
        name="Second Term",
        start_month=1,
        end_month=4,
        description="Continuation term with intensive learning and skill development",
        key_activities=(
            "Second term curriculum advancement",
            "Skills development workshops",
            "Mid-term assessments (February)",
            "Cultural heritage celebrations",
            "Community service projects",
            "Second term final examinations (April)",
        ),
    ),
    AcademicTerm(
        term_number=3,
        name="Third Term",
        start_month=5,
        end_month=7,
        description="Final term with comprehensive assessments and graduation preparations",
        key_activities=(
            "Final term intensive review",
            "Comprehensive examinations preparation",
            "Graduation ceremony preparations",
            "Final assessments and evaluations",
            "Academic year completion ceremonies",
            "Summer break preparation and planning",
        ),
    ),
)


def calculate_easter(year: int) -> date:
    """Easter Sunday (Western) via the Anonymous Gregorian algorithm."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    n, p = divmod(h + l - 7 * m + 114, 31)
    return date(year, n, p + 1)


def good_friday(year: int) -> date:
    return calculate_easter(year) - timedelta(days=2)


def holiday_date(holiday: LiberianHoliday, year: int) -> date:
    if holiday.date == EASTER_MINUS_2:
        return good_friday(year)
    month, day = (int(part) for part in holiday.date.split("-"))
    return date(year, month, day)


def _event_description(holiday: LiberianHoliday) -> str:
    activities = "\n".join(f"• {activity}" for activity in holiday.educational_activities)
    return (
        f"{holiday.description}\n\n"
        f"🎓 Educational Activities:\n{activities}\n\n"
        f"🇱🇷 Cultural Significance: {holiday.cultural_significance}"
    )


def _to_event(holiday: LiberianHoliday, year: int, icon: str) -> CalendarEvent:
    return CalendarEvent(
        id=f"{holiday.id}_{year}",
        title=f"{icon} {holiday.name}",
        date=holiday_date(holiday, year),
        description=_event_description(holiday),
        category=holiday.category,
        is_national_holiday=holiday.is_national_holiday,
    )


def generate_school_events(year: int) -> list[CalendarEvent]:
    """All national holidays and cultural events for ``year``, ordered by date."""
    if year < 1 or year > 9999:
        raise ValueError(f"year out of range: {year}")
    events = [_to_event(h, year, "🇱🇷") for h in LIBERIAN_NATIONAL_HOLIDAYS]
    events += [_to_event(h, year, "🎭") for h in LIBERIAN_CULTURAL_EVENTS]
    return sorted(events, key=lambda ev: (ev.date, ev.id))


def get_term(term_number: int) -> AcademicTerm:
    for term in LIBERIAN_ACADEMIC_TERMS:
        if term.term_number == term_number:
            return term
    raise ValueError(f"unknown term: {term_number}")


def term_for_date(day: Optional[date] = None) -> Optional[AcademicTerm]:
    """The term covering ``day`` (today by default); None during the August break."""
    day = day or date.today()
    for term in LIBERIAN_ACADEMIC_TERMS:
        if term.contains(day):
            return term
    return None


def next_term(day: Optional[date] = None) -> AcademicTerm:
    """The term in progress, or the one that starts next when school is out."""
    day = day or date.today()
    current = term_for_date(day)
    if current is not None:
        return current
    # August is the only gap; First Term opens in September
    return get_term(1)


def is_date_in_term(day: date, term: AcademicTerm | int) -> bool:
    if isinstance(term, int):
        term = get_term(term)
    return term.contains(day)


def events_in_term(events: Iterable[Any], term: AcademicTerm | int) -> list[Any]:
    """Filter anything with a ``date`` attribute (or key) down to one term's months."""
    if isinstance(term, int):
        term = get_term(term)
    out = []
    for ev in events:
        day = ev["date"] if isinstance(ev, dict) else ev.date
        if isinstance(day, str):
            day = date.fromisoformat(day[:10])
        if term.contains(day):
            out.append(ev)
    return out


__all__ = [
    "AcademicTerm",
    "CalendarEvent",
    "LiberianHoliday",
    "LIBERIAN_ACADEMIC_TERMS",
    "LIBERIAN_CULTURAL_EVENTS",
    "LIBERIAN_NATIONAL_HOLIDAYS",
    "calculate_easter",
    "events_in_term",
    "generate_school_events",
    "get_term",
    "good_friday",
    "holiday_date",
    "is_date_in_term",
    "next_term",
    "term_for_date",
]
