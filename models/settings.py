from dataclasses import dataclass

from utils.constants import DEFAULT_CURRENCY_SYMBOL


@dataclass
class AppSettings:
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    notifications_enabled: bool = False
    dark_mode: bool = False
    app_lock_enabled: bool = False
    use_biometric: bool = True
    use_pin: bool = False
    first_weekday: int = 0          # 0=Mon..6=Sun
    date_format: str = "MM/DD/YYYY"
