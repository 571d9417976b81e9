from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from models.category import BuiltinCategory


class TimeScope(Enum):
    ALL = "All"
    TODAY = "Today"
    CUSTOM = "Custom"


@dataclass
class FilterState:
    time_scope: TimeScope = TimeScope.ALL
    category: Optional[BuiltinCategory] = None     # None = all categories
    search: str = ""
    custom_date: Optional[datetime] = None
