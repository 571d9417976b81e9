import pytest

from database.category_dao import CategoryDAO
from models.category import ExpenseCategory, IncomeCategory
from utils.constants import PLACEHOLDER_EMOJI


def test_seeded_expense_categories(category_service):
    names = {c.name for c in category_service.get_expense_categories()}
    assert names == {"Food", "Travel", "Shopping", "Bills", "Entertainment", "Health", "Other"}
    assert all(c.color_hex is None for c in category_service.get_expense_categories())


def test_seeding_happens_only_once(db, category_service):
    food = next(c for c in category_service.get_all() if c.name == "Food")
    category_service.delete(food.id)

    db.initialize()
    names = {c.name for c in CategoryDAO(db).get_all()}
    assert "Food" not in names


def test_create_trims_and_keeps_one_grapheme(category_service):
    cat = category_service.create("  Pizza  ", "🍕🍔")
    assert cat.name == "Pizza"
    assert cat.emoji == "🍕"


def test_create_keeps_multi_codepoint_graphemes_whole(category_service):
    flag = category_service.create("Trips", "🇮🇳x")
    family = category_service.create("Family", "👨‍👩‍👧 extra")
    assert flag.emoji == "🇮🇳"
    assert family.emoji == "👨‍👩‍👧"


def test_create_rejects_empty_name(category_service):
    with pytest.raises(ValueError, match="empty"):
        category_service.create("   ", "🍕")


def test_duplicate_names_are_case_insensitive(category_service):
    with pytest.raises(ValueError, match="already exists"):
        category_service.create("food", "🍽️")


def test_rename_to_own_name_is_allowed(category_service):
    food = next(c for c in category_service.get_all() if c.name == "Food")
    updated = category_service.update(food.id, "FOOD", "🍽️")
    assert updated.name == "FOOD"


def test_income_categories_are_not_editable(category_service):
    with pytest.raises(ValueError):
        category_service.create("Side gig", "💼", kind="income")


def test_color_is_normalized_or_rejected(category_service):
    cat = category_service.create("Coffee", "☕", "abc")
    assert cat.color_hex == "#AABBCC"
    with pytest.raises(ValueError, match="hex"):
        category_service.create("Tea", "🍵", "#12")


def test_names_for_kind(category_service):
    expense_names = category_service.names_for_kind("expense")
    assert "Food" in expense_names
    assert category_service.names_for_kind("income") == [c.label for c in IncomeCategory]


def test_display_emoji_uses_placeholder(category_service):
    cat = category_service.create("Misc", "")
    assert category_service.display_emoji(cat) == PLACEHOLDER_EMOJI


def test_suggest_color(category_service):
    assert category_service.suggest_color("🚗") == "#FF3B30"
    assert category_service.suggest_color("❤️") == "#FFB3D9"
    assert category_service.suggest_color("🐶") is None


# ── Resolver ──────────────────────────────────────────────────────────────────

def test_resolver_matches_registry_case_insensitively(resolver, make_record):
    lower = make_record(5.0, category="food")
    exact = make_record(5.0, category="Food")
    assert resolver.resolve(lower, is_dark=True) == resolver.resolve(exact, is_dark=True)
    assert resolver.resolve(lower).emoji == "🍽️"


def test_light_theme_never_tints(resolver, category_service, make_record):
    category_service.create("Coffee", "☕", "#123456")
    for name in ("Coffee", "Travel", "Unknown thing"):
        assert resolver.resolve(make_record(1.0, category=name), is_dark=False).color is None


def test_dark_theme_prefers_explicit_color(resolver, category_service, make_record):
    category_service.create("Coffee", "☕", "#123456")
    display = resolver.resolve(make_record(1.0, category="Coffee"), is_dark=True)
    assert display.emoji == "☕"
    assert display.color == "#123456"


def test_dark_theme_infers_color_from_emoji(resolver, make_record):
    display = resolver.resolve(make_record(1.0, category="Travel"), is_dark=True)
    assert display.emoji == "🚗"
    assert display.color == "#FF3B30"


def test_dark_theme_falls_back_to_enumerated_tint(resolver, category_service, make_record):
    category_service.create("Pets", "🐶")
    display = resolver.resolve(make_record(1.0, category="Pets"), is_dark=True)
    assert display.emoji == "🐶"
    assert display.color == ExpenseCategory.OTHER.tint


def test_unknown_name_resolves_to_other(resolver, make_record):
    light, dark = resolver.resolve_both(make_record(1.0, category="Nonexistent"))
    assert light.emoji == dark.emoji == ExpenseCategory.OTHER.emoji
    assert light.color is None
    assert dark.color == ExpenseCategory.OTHER.tint


def test_empty_registry_emoji_falls_back_to_enumeration(resolver, category_service, make_record):
    category_service.create("Misc", "")
    assert resolver.resolve(make_record(1.0, category="Misc")).emoji == ExpenseCategory.OTHER.emoji


def test_income_records_resolve_from_enumeration(resolver, make_record):
    display = resolver.resolve(make_record(1.0, category="Salary", kind="income"), is_dark=True)
    assert display.emoji == IncomeCategory.SALARY.emoji
    assert display.color == IncomeCategory.SALARY.tint


def test_deleted_category_falls_back(resolver, category_service, make_record):
    travel = next(c for c in category_service.get_all() if c.name == "Travel")
    category_service.delete(travel.id)
    display = resolver.resolve(make_record(1.0, category="Travel"), is_dark=True)
    assert display.emoji == ExpenseCategory.TRAVEL.emoji
    assert display.color == ExpenseCategory.TRAVEL.tint


def test_emoji_outside_color_table_uses_enumerated_tint(resolver, category_service, make_record):
    category_service.create("Work", "💼")
    display = resolver.resolve(make_record(1.0, category="Work"), is_dark=True)
    assert display.emoji == "💼"
    assert display.color == ExpenseCategory.OTHER.tint
    assert category_service.suggest_color("💼") is None
