# Django discovers app models here; they are defined in the data layer.
from .data.models import ReviewLog, ReviewStateRecord

__all__ = ["ReviewLog", "ReviewStateRecord"]
