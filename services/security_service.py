"""App lock: a two-state gate unlocked by PIN or biometric check.

The gate never touches records; it only decides whether the window may show
its contents. Lifecycle events from the host window lock it (when app lock
is enabled); a matching PIN or a successful biometric check unlocks it.
"""
import logging
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import bcrypt

from database.db_manager import StoreError
from database.secret_dao import SecretDAO
from models.settings import AppSettings
from services.settings_service import SettingsService
from utils.constants import PASSCODE_SECRET_KEY, PIN_LENGTH

logger = logging.getLogger(__name__)


class LockState(Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"


class AppLifecycle(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BACKGROUND = "background"


class AuthFailure(Enum):
    DISABLED = "disabled"
    NO_PASSCODE = "no_passcode"
    WRONG_PIN = "wrong_pin"
    BIOMETRIC_FAILED = "biometric_failed"
    BIOMETRIC_UNAVAILABLE = "biometric_unavailable"


@dataclass(frozen=True)
class AuthResult:
    success: bool
    reason: Optional[AuthFailure] = None
    message: str = ""


@dataclass(frozen=True)
class BiometricResult:
    success: bool
    available: bool = True
    error: Optional[str] = None


class BiometricAuthenticator(ABC):
    """Platform biometric check. Implementations resolve once the prompt closes."""

    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    async def authenticate(self, reason: str) -> BiometricResult:
        ...


class UnavailableBiometricAuthenticator(BiometricAuthenticator):
    """Used on hosts without a biometric service."""

    MESSAGE = "Biometric authentication is not available on this device."

    def is_available(self) -> bool:
        return False

    async def authenticate(self, reason: str) -> BiometricResult:
        return BiometricResult(success=False, available=False, error=self.MESSAGE)


class SecurityGate:
    UNLOCK_REASON = "Authenticate to unlock the app"
    WRONG_PIN_MESSAGE = "Incorrect PIN. Try again."

    def __init__(
        self,
        settings: AppSettings,
        settings_service: SettingsService,
        secret_dao: SecretDAO,
        biometric: BiometricAuthenticator | None = None,
    ):
        self._settings = settings
        self._settings_svc = settings_service
        self._secrets = secret_dao
        self._biometric = biometric or UnavailableBiometricAuthenticator()
        self._passcode_hash: bytes | None = self._secrets.load(PASSCODE_SECRET_KEY)
        self._listeners: list[Callable[[LockState], None]] = []

        self._authenticated = False
        self._locked = self._settings.app_lock_enabled and not self._authenticated

    # ── State ─────────────────────────────────────────────────────────────────

    @property
    def state(self) -> LockState:
        return LockState.LOCKED if self._locked else LockState.UNLOCKED

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    @property
    def enabled(self) -> bool:
        return self._settings.app_lock_enabled

    @property
    def use_pin(self) -> bool:
        return self._settings.use_pin

    @property
    def use_biometric(self) -> bool:
        return self._settings.use_biometric

    @property
    def has_passcode(self) -> bool:
        return self._passcode_hash is not None

    @property
    def biometric_available(self) -> bool:
        return self._biometric.is_available()

    def subscribe(self, callback: Callable[[LockState], None]):
        """callback(state) runs after every lock/unlock transition."""
        self._listeners.append(callback)

    def _set_locked(self, locked: bool):
        changed = locked != self._locked
        self._locked = locked
        self._authenticated = not locked
        if changed:
            logger.info("App %s", "locked" if locked else "unlocked")
            for callback in list(self._listeners):
                callback(self.state)

    # ── Transitions ───────────────────────────────────────────────────────────

    def on_lifecycle(self, event: AppLifecycle):
        if event in (AppLifecycle.BACKGROUND, AppLifecycle.INACTIVE):
            self.lock()

    def lock(self):
        if self._settings.app_lock_enabled:
            self._set_locked(True)

    def unlock(self):
        self._set_locked(False)

    def reset_authentication(self):
        self._set_locked(False)
        self._authenticated = False

    def submit_pin(self, candidate: str) -> AuthResult:
        if not self._settings.use_pin:
            return AuthResult(False, AuthFailure.DISABLED)
        if self._passcode_hash is None:
            return AuthResult(False, AuthFailure.NO_PASSCODE)
        if not bcrypt.checkpw(candidate.encode("utf-8"), self._passcode_hash):
            logger.warning("PIN unlock attempt failed")
            return AuthResult(False, AuthFailure.WRONG_PIN, self.WRONG_PIN_MESSAGE)
        self._set_locked(False)
        return AuthResult(True)

    async def submit_biometric(self) -> AuthResult:
        if not self._settings.use_biometric:
            return AuthResult(False, AuthFailure.DISABLED)
        if not self._locked:
            return AuthResult(True)

        result = await self._biometric.authenticate(self.UNLOCK_REASON)

        # The prompt may resolve after another path already unlocked the app
        if not self._locked:
            return AuthResult(True)
        if result.success:
            self._set_locked(False)
            return AuthResult(True)
        reason = AuthFailure.BIOMETRIC_FAILED if result.available else AuthFailure.BIOMETRIC_UNAVAILABLE
        logger.warning("Biometric unlock failed: %s", result.error)
        return AuthResult(False, reason, result.error or "")

    # ── Configuration ─────────────────────────────────────────────────────────

    def set_passcode(self, pin: str):
        if len(pin) != PIN_LENGTH or not pin.isdigit():
            raise ValueError(f"PIN must be exactly {PIN_LENGTH} digits.")
        hashed = bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt())
        try:
            self._secrets.save(PASSCODE_SECRET_KEY, hashed)
        except sqlite3.Error as e:
            logger.exception("Failed to store passcode")
            raise StoreError("Could not save the PIN.") from e
        self._passcode_hash = hashed
        logger.info("Passcode updated")

    def clear_passcode(self):
        try:
            self._secrets.delete(PASSCODE_SECRET_KEY)
        except sqlite3.Error as e:
            logger.exception("Failed to remove passcode")
            raise StoreError("Could not remove the PIN.") from e
        self._passcode_hash = None
        if self._settings.use_pin:
            self._settings_svc.update(self._settings, use_pin=False)
        logger.info("Passcode removed")

    def configure(
        self,
        enabled: bool | None = None,
        use_biometric: bool | None = None,
        use_pin: bool | None = None,
    ):
        enabled = self._settings.app_lock_enabled if enabled is None else enabled
        use_biometric = self._settings.use_biometric if use_biometric is None else use_biometric
        use_pin = self._settings.use_pin if use_pin is None else use_pin

        if use_pin and self._passcode_hash is None:
            raise ValueError("Set up a PIN before enabling PIN unlock.")
        if enabled and not (use_pin or use_biometric):
            raise ValueError("Choose at least one unlock method.")

        self._settings_svc.update(
            self._settings,
            app_lock_enabled=enabled,
            use_biometric=use_biometric,
            use_pin=use_pin,
        )
        if not enabled and self._locked:
            self._set_locked(False)


class PinSetupStep(Enum):
    ENTER = "enter"
    CONFIRM = "confirm"
    DONE = "done"


class PinSetupFlow:
    """Enter a PIN, then confirm it; a match stores it on the gate."""

    MISMATCH_MESSAGE = "PINs don't match. Try again."

    def __init__(self, gate: SecurityGate):
        self._gate = gate
        self.step = PinSetupStep.ENTER
        self.first = ""
        self.second = ""
        self.error = ""

    @property
    def current(self) -> str:
        return self.first if self.step == PinSetupStep.ENTER else self.second

    def press(self, digit: str) -> PinSetupStep:
        if self.step == PinSetupStep.DONE or not (len(digit) == 1 and digit.isdigit()):
            return self.step
        self.error = ""
        if self.step == PinSetupStep.ENTER:
            self.first += digit
            if len(self.first) == PIN_LENGTH:
                self.step = PinSetupStep.CONFIRM
        else:
            self.second += digit
            if len(self.second) == PIN_LENGTH:
                self._check_match()
        return self.step

    def delete(self):
        self.error = ""
        if self.step == PinSetupStep.ENTER:
            self.first = self.first[:-1]
        elif self.step == PinSetupStep.CONFIRM:
            self.second = self.second[:-1]

    def _check_match(self):
        if self.first == self.second:
            self._gate.set_passcode(self.first)
            self.step = PinSetupStep.DONE
        else:
            self.error = self.MISMATCH_MESSAGE
            self.second = ""
