from dataclasses import dataclass, field

from models.category import BuiltinCategory


@dataclass(frozen=True)
class Statistics:
    total_today: float = 0.0
    total_this_week: float = 0.0
    total_this_month: float = 0.0
    category_breakdown: dict[BuiltinCategory, float] = field(default_factory=dict)

    @property
    def total(self) -> float:
        return sum(self.category_breakdown.values())

    def breakdown_share(self, category: BuiltinCategory) -> float:
        """Fraction of the breakdown total that belongs to category."""
        total = self.total
        if total <= 0:
            return 0.0
        return self.category_breakdown.get(category, 0.0) / total
