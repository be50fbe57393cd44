"""
Locally computed sky data: moon phase, meteor showers and a space weather card.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from astralchronos.dates import format_long_date
from astralchronos.models.schemas import MeteorShower, MoonPhase, SolarActivity

# Reference new moon: 2000-01-06 18:14 UTC
REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=timezone.utc)
SYNODIC_MONTH_DAYS = 29.530588853
MEAN_MOON_DISTANCE = "384,400 km"

# Upper bounds of the cycle fraction for each phase name
PHASE_BOUNDARIES = [
    (0.0625, "New Moon"),
    (0.1875, "Waxing Crescent"),
    (0.3125, "First Quarter"),
    (0.4375, "Waxing Gibbous"),
    (0.5625, "Full Moon"),
    (0.6875, "Waning Gibbous"),
    (0.8125, "Last Quarter"),
    (0.9375, "Waning Crescent"),
    (1.0, "New Moon"),
]

ACTIVE_WINDOW_DAYS = 3


def moon_age(moment: datetime) -> float:
    """Days since the most recent new moon."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    elapsed = (moment - REFERENCE_NEW_MOON).total_seconds() / 86400
    return elapsed % SYNODIC_MONTH_DAYS


def phase_name(age: float) -> str:
    fraction = (age % SYNODIC_MONTH_DAYS) / SYNODIC_MONTH_DAYS
    for upper, name in PHASE_BOUNDARIES:
        if fraction < upper:
            return name
    return "New Moon"


def illumination_percent(age: float) -> int:
    """Illuminated fraction of the disc, in percent."""
    angle = 2 * math.pi * age / SYNODIC_MONTH_DAYS
    return round((1 - math.cos(angle)) / 2 * 100)


def next_full_moon(moment: datetime) -> datetime:
    """First full moon strictly after the given moment."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    age = moon_age(moment)
    half = SYNODIC_MONTH_DAYS / 2
    if age < half:
        days_ahead = half - age
    else:
        days_ahead = SYNODIC_MONTH_DAYS - age + half
    return moment + timedelta(days=days_ahead)


def get_moon_phase(moment: Optional[datetime] = None) -> MoonPhase:
    """Moon phase card for the dashboard."""
    moment = moment or datetime.now(timezone.utc)
    age = moon_age(moment)
    return MoonPhase(
        phase=phase_name(age),
        illumination=f"{illumination_percent(age)}%",
        age_days=round(age, 2),
        nextFull=format_long_date(next_full_moon(moment).date()),
        distance=MEAN_MOON_DISTANCE,
    )


@dataclass(frozen=True)
class ShowerPeak:
    name: str
    month: int
    first_day: int
    last_day: int
    rate: int

    def peak_on(self, year: int) -> date:
        return date(year, self.month, self.first_day)

    @property
    def peak_label(self) -> str:
        return f"{date(2000, self.month, 1).strftime('%b')} {self.first_day}-{self.last_day}"


ANNUAL_SHOWERS = [
    ShowerPeak("Quadrantids", 1, 3, 4, 40),
    ShowerPeak("Lyrids", 4, 22, 23, 18),
    ShowerPeak("Eta Aquariids", 5, 5, 6, 50),
    ShowerPeak("Perseids", 8, 12, 13, 100),
    ShowerPeak("Orionids", 10, 21, 22, 20),
    ShowerPeak("Leonids", 11, 17, 18, 15),
    ShowerPeak("Geminids", 12, 13, 14, 60),
]


def _is_active(shower: ShowerPeak, today: date) -> bool:
    return any(
        abs((today - shower.peak_on(year)).days) <= ACTIVE_WINDOW_DAYS
        for year in (today.year - 1, today.year, today.year + 1)
    )


def _next_peak(shower: ShowerPeak, today: date) -> date:
    peak = shower.peak_on(today.year)
    return peak if peak > today else shower.peak_on(today.year + 1)


def get_meteor_showers(today: Optional[date] = None) -> List[MeteorShower]:
    """Active showers followed by the next upcoming one."""
    today = today or datetime.now(timezone.utc).date()

    showers = [
        MeteorShower(name=s.name, peak=s.peak_label, rate=s.rate, status="Active")
        for s in ANNUAL_SHOWERS if _is_active(s, today)
    ]

    upcoming = [s for s in ANNUAL_SHOWERS if not _is_active(s, today)]
    if upcoming:
        following = min(upcoming, key=lambda s: _next_peak(s, today))
        showers.append(MeteorShower(
            name=following.name, peak=following.peak_label, rate=following.rate, status="Upcoming"
        ))

    return showers


def get_solar_activity() -> SolarActivity:
    # TODO: replace with NOAA SWPC solar wind and X-ray flux feeds
    return SolarActivity(solar_wind="450 km/s", geomagnetic_field="Quiet", xray_level="C2.1")


def truncate_text(text: Optional[str], limit: int = 100) -> str:
    """Shorten text for dashboard cards, appending '...' when cut."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
