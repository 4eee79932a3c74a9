from django.utils import timezone

TIME_AGO_INTERVALS = (
    ('year', 31536000),
    ('month', 2592000),
    ('week', 604800),
    ('day', 86400),
    ('hour', 3600),
    ('minute', 60),
)


def time_ago(value, now=None):
    """Render a past datetime as "3 hours ago", or "just now" under a minute."""
    now = now or timezone.now()
    seconds = int((now - value).total_seconds())

    for unit, unit_seconds in TIME_AGO_INTERVALS:
        count = seconds // unit_seconds
        if count >= 1:
            return f"{count} {unit}{'' if count == 1 else 's'} ago"
    return 'just now'


def month_calendar(events, today=None):
    """Group the current month's events by day of month."""
    today = today or timezone.localdate()
    by_day = {}
    for event in events:
        local = timezone.localtime(event.date)
        if local.year == today.year and local.month == today.month:
            by_day.setdefault(local.day, []).append(event)
    return by_day
