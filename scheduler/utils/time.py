from django.utils import timezone


def local_today(now=None):
    """Calendar date of ``now`` in the configured TIME_ZONE."""
    now = now or timezone.now()
    return timezone.localdate(now)
