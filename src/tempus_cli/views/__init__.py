"""Screen state objects that read from a TaskStore and forward user intents."""

from .calendar import CalendarView, DaySection
from .lists import ListsView

__all__ = ["CalendarView", "DaySection", "ListsView"]
