import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from database.category_dao import CategoryDAO
from database.db_manager import StoreError
from models.category import Category, builtin_categories_for
from models.transaction import Transaction
from utils.constants import PLACEHOLDER_EMOJI
from utils.emoji_helpers import color_for_emoji, first_grapheme, normalize_hex

logger = logging.getLogger(__name__)

# Income categories are the fixed IncomeCategory enumeration; only expense
# categories live in the editable registry.
EDITABLE_KINDS = ("expense",)


class CategoryService:
    def __init__(self, category_dao: CategoryDAO):
        self._dao = category_dao

    def get_all(self) -> list[Category]:
        return self._dao.get_all()

    def get_expense_categories(self) -> list[Category]:
        return self._dao.get_by_kind("expense")

    def names_for_kind(self, kind: str) -> list[str]:
        """Choices offered when entering a record of the given kind."""
        if kind in EDITABLE_KINDS:
            names = [c.name for c in self._dao.get_by_kind(kind)]
            if names:
                return names
        return [c.label for c in builtin_categories_for(kind)]

    @staticmethod
    def display_emoji(category: Category) -> str:
        return category.emoji or PLACEHOLDER_EMOJI

    @staticmethod
    def suggest_color(emoji: str | None) -> str | None:
        return color_for_emoji(emoji)

    def create(
        self,
        name: str,
        emoji: str | None = None,
        color_hex: str | None = None,
        kind: str = "expense",
    ) -> Category:
        self._check_kind(kind)
        name, emoji, color_hex = self._clean(name, emoji, color_hex)
        if self._dao.find_by_name(name, kind):
            raise ValueError(f"A category named '{name}' already exists.")
        try:
            category = self._dao.create(name, kind, emoji, color_hex)
        except sqlite3.Error as e:
            logger.exception("Failed to create category %r", name)
            raise StoreError("Could not save category.") from e
        logger.info("Created %s category %r", kind, name)
        return category

    def update(
        self,
        category_id: int,
        name: str,
        emoji: str | None = None,
        color_hex: str | None = None,
    ) -> Category:
        current = self._dao.get_by_id(category_id)
        if current is None:
            raise ValueError("Category no longer exists.")
        self._check_kind(current.kind)
        name, emoji, color_hex = self._clean(name, emoji, color_hex)
        clash = self._dao.find_by_name(name, current.kind)
        if clash and clash.id != category_id:
            raise ValueError(f"A category named '{name}' already exists.")
        try:
            return self._dao.update(category_id, name, emoji, color_hex)
        except sqlite3.Error as e:
            logger.exception("Failed to update category %s", category_id)
            raise StoreError("Could not save category.") from e

    def delete(self, category_id: int):
        """Records keep their category name and resolve through the fallbacks."""
        cat = self._dao.get_by_id(category_id)
        if cat is None:
            return
        self._check_kind(cat.kind)
        try:
            self._dao.delete(category_id)
        except sqlite3.Error as e:
            logger.exception("Failed to delete category %s", category_id)
            raise StoreError("Could not delete category.") from e
        logger.info("Deleted %s category %r", cat.kind, cat.name)

    @staticmethod
    def _check_kind(kind: str):
        if kind not in EDITABLE_KINDS:
            raise ValueError(f"{kind.title()} categories cannot be edited.")

    @staticmethod
    def _clean(name: str, emoji: str | None, color_hex: str | None) -> tuple[str, str, Optional[str]]:
        name = (name or "").strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        raw_color = (color_hex or "").strip()
        color = normalize_hex(raw_color) if raw_color else None
        if raw_color and color is None:
            raise ValueError("Color must be a hex value like #RRGGBB.")
        return name, first_grapheme(emoji), color


@dataclass(frozen=True)
class CategoryDisplay:
    emoji: str
    color: Optional[str]        # None = no tint, render with the default text color


class CategoryResolver:
    """Resolve a record's emoji and tint from the registry, with enum fallbacks.

    Lookup order:
      1. registry category of the same kind, name matched case-insensitively:
         its emoji when non-empty, its explicit color when set;
      2. registry match without a color: infer one from the emoji table;
      3. otherwise the enumerated category for the name (Other when unknown).
    Tints only apply to dark themes; light themes get no tint at all.
    """

    def __init__(self, category_dao: CategoryDAO):
        self._dao = category_dao

    def resolve(self, record: Transaction, is_dark: bool = False) -> CategoryDisplay:
        builtin = record.builtin_category
        match = self._dao.find_by_name(record.category_name, record.kind)

        emoji = match.emoji if match and match.emoji else builtin.emoji
        if not is_dark:
            return CategoryDisplay(emoji=emoji, color=None)

        color = None
        if match:
            color = normalize_hex(match.color_hex) or color_for_emoji(match.emoji)
        return CategoryDisplay(emoji=emoji, color=color or builtin.tint)

    def resolve_both(self, record: Transaction) -> tuple[CategoryDisplay, CategoryDisplay]:
        """(light, dark) outcomes for callers that render both."""
        return self.resolve(record, is_dark=False), self.resolve(record, is_dark=True)
