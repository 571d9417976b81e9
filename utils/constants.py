APP_NAME = "Expense Tracker"
APP_VERSION = "1.0.0"
APP_WIDTH = 1100
APP_HEIGHT = 720
DB_FILE = "expenses.db"

DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

TRANSACTION_KINDS = ("expense", "income")

DEFAULT_CURRENCY_SYMBOL = "₹"
PLACEHOLDER_EMOJI = "🗂️"
PIN_LENGTH = 4

# Seeded once into an empty categories table: (name, emoji, color_hex)
DEFAULT_EXPENSE_CATEGORIES = [
    ("Food",          "🍽️", None),
    ("Travel",        "🚗", None),
    ("Shopping",      "🛍️", None),
    ("Bills",         "🧾", None),
    ("Entertainment", "📺", None),
    ("Health",        "❤️", None),
    ("Other",         "⚪️", None),
]

# Emoji (variation selectors stripped) → suggested/inferred color
EMOJI_COLORS = {
    "🚗": "#FF3B30",
    "🍽": "#8E8E93",
    "🛍": "#FFB3D9",
    "🧾": "#FFFFFF",
    "📺": "#5AC8FA",
    "❤": "#FFB3D9",
    "⚪": "#8E8E93",
}

EMOJI_CHOICES = [
    "🍽️", "🚗", "🛍️", "🧾", "📺", "❤️", "⚪️", "🏠", "✈️", "🎓",
    "💊", "🐶", "☕", "🎮", "📚", "💡", "💰", "💼", "⭐", "🎁", "📈", "🏢",
]

DEFAULT_SETTINGS = {
    "currency_symbol": DEFAULT_CURRENCY_SYMBOL,
    "notifications_enabled": "0",
    "dark_mode": "0",
    "app_lock_enabled": "0",
    "use_biometric": "1",
    "use_pin": "0",
    "first_weekday": "0",
    "date_format": "MM/DD/YYYY",
}

PASSCODE_SECRET_KEY = "app_passcode"

INCOME_COLOR = "#4CAF50"
EXPENSE_COLOR = "#F44336"
NET_POSITIVE_COLOR = "#34C759"
NET_NEGATIVE_COLOR = "#FF3B30"

# Document export layout, in points
PAGE_WIDTH = 612
PAGE_HEIGHT = 792
PAGE_MARGIN = 72
LINE_HEIGHT = 20
