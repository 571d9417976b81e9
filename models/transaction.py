from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models.category import BuiltinCategory, builtin_categories_for


@dataclass
class Transaction:
    id: str
    kind: str               # 'expense' | 'income'
    amount: float
    category_name: str
    occurred_at: datetime
    notes: Optional[str] = None

    @property
    def builtin_category(self) -> BuiltinCategory:
        """Enumerated category matching category_name exactly, else Other."""
        return builtin_categories_for(self.kind).from_name(self.category_name)

    @property
    def is_income(self) -> bool:
        return self.kind == "income"
