import pytest

from app.core.schemas import Activity, OpeningHours, OpeningHoursPeriod, OpeningHoursPoint


def _period(day: int, open_time: str, close_time: str, close_day: int | None = None):
    return OpeningHoursPeriod(
        open=OpeningHoursPoint(day=day, time=open_time),
        close=OpeningHoursPoint(day=day if close_day is None else close_day, time=close_time),
    )


@pytest.fixture
def make_hours():
    """Build OpeningHours with the same open/close on the given weekdays (0=Sunday)."""

    def _make(
        open_time: str = "0900",
        close_time: str = "1700",
        text: str = "9:00 AM – 5:00 PM",
        closed_days: tuple[int, ...] = (1,),
    ) -> OpeningHours:
        names = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
        # Google lists weekday_text starting on Monday
        weekday_text = [
            f"{names[d]}: {'Closed' if d in closed_days else text}" for d in (1, 2, 3, 4, 5, 6, 0)
        ]
        periods = [_period(d, open_time, close_time) for d in range(7) if d not in closed_days]
        return OpeningHours(weekday_text=weekday_text, periods=periods)

    return _make


@pytest.fixture
def museum_hours(make_hours):
    """9 AM - 5 PM, closed Mondays."""
    return make_hours()


@pytest.fixture
def bar_hours():
    """Friday 8 PM until 2 AM Saturday."""
    return OpeningHours(
        weekday_text=["Friday: 8:00 PM – 2:00 AM"],
        periods=[_period(5, "2000", "0200", close_day=6)],
    )


@pytest.fixture
def make_activity():
    def _make(name: str, time: str, hours: OpeningHours | None = None, **kwargs) -> Activity:
        return Activity(name=name, address=f"{name} St", time=time, opening_hours=hours, **kwargs)

    return _make
