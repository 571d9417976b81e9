from dataclasses import dataclass
from enum import Enum
from typing import Optional

CATEGORY_KINDS = ("expense", "income")


@dataclass
class Category:
    id: int
    name: str
    kind: str                       # 'expense' | 'income'
    emoji: str = ""
    color_hex: Optional[str] = None


class BuiltinCategory(Enum):
    """Fixed, compiled-in category with a display name, emoji and dark-theme tint."""

    def __init__(self, label: str, emoji: str, tint: str):
        self.label = label
        self.emoji = emoji
        self.tint = tint

    @classmethod
    def from_name(cls, name: str | None):
        """Exact-name lookup; anything unknown is Other."""
        for member in cls:
            if member.label == name:
                return member
        return cls.OTHER


class ExpenseCategory(BuiltinCategory):
    FOOD = ("Food", "🍽️", "#8E8E93")
    TRAVEL = ("Travel", "🚗", "#FF3B30")
    SHOPPING = ("Shopping", "🛍️", "#FFB3D9")
    BILLS = ("Bills", "🧾", "#FFFFFF")
    ENTERTAINMENT = ("Entertainment", "📺", "#5AC8FA")
    HEALTH = ("Health", "❤️", "#FF2D55")
    OTHER = ("Other", "⚪️", "#8E8E93")


class IncomeCategory(BuiltinCategory):
    SALARY = ("Salary", "💰", "#32D74B")
    BONUS = ("Bonus", "⭐", "#FFD60A")
    INVESTMENT = ("Investment", "📈", "#0A84FF")
    FREELANCE = ("Freelance", "💼", "#BF5AF2")
    GIFT = ("Gift", "🎁", "#FF375F")
    BUSINESS = ("Business", "🏢", "#5E5CE6")
    OTHER = ("Other", "⚪️", "#8E8E93")


def builtin_categories_for(kind: str) -> type[BuiltinCategory]:
    if kind == "income":
        return IncomeCategory
    return ExpenseCategory
