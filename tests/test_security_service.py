import asyncio
import sqlite3

import pytest

from database.db_manager import StoreError
from services.security_service import (
    AppLifecycle, AuthFailure, BiometricAuthenticator, BiometricResult, LockState,
    PinSetupFlow, PinSetupStep, SecurityGate, UnavailableBiometricAuthenticator,
)
from utils.constants import PASSCODE_SECRET_KEY


class FakeBiometric(BiometricAuthenticator):
    def __init__(self, result: BiometricResult, before_return=None):
        self.result = result
        self.before_return = before_return
        self.reasons: list[str] = []

    def is_available(self) -> bool:
        return self.result.available

    async def authenticate(self, reason: str) -> BiometricResult:
        self.reasons.append(reason)
        if self.before_return:
            self.before_return()
        return self.result


@pytest.fixture
def pin_gate(gate) -> SecurityGate:
    """Gate with lock enabled, PIN 1234 configured, currently locked."""
    gate.set_passcode("1234")
    gate.configure(enabled=True, use_pin=True)
    gate.lock()
    return gate


def _biometric_gate(settings, settings_service, secret_dao, result, before_return=None):
    fake = FakeBiometric(result, before_return)
    gate = SecurityGate(settings, settings_service, secret_dao, biometric=fake)
    gate.configure(enabled=True, use_biometric=True)
    gate.lock()
    return gate, fake


def test_starts_unlocked_when_lock_disabled(gate):
    assert gate.state == LockState.UNLOCKED
    assert not gate.is_locked


def test_starts_locked_when_lock_enabled(settings, settings_service, secret_dao):
    settings_service.update(settings, app_lock_enabled=True)
    gate = SecurityGate(settings, settings_service, secret_dao)
    assert gate.is_locked
    assert not gate.is_authenticated


def test_wrong_then_right_pin(pin_gate):
    wrong = pin_gate.submit_pin("0000")
    assert not wrong.success
    assert wrong.reason == AuthFailure.WRONG_PIN
    assert wrong.message == "Incorrect PIN. Try again."
    assert pin_gate.is_locked

    right = pin_gate.submit_pin("1234")
    assert right.success
    assert not pin_gate.is_locked
    assert pin_gate.is_authenticated


def test_pin_rejected_when_pin_unlock_disabled(gate):
    gate.set_passcode("1234")
    result = gate.submit_pin("1234")
    assert result.reason == AuthFailure.DISABLED


def test_passcode_is_stored_hashed(gate, secret_dao):
    gate.set_passcode("4321")
    stored = secret_dao.load(PASSCODE_SECRET_KEY)
    assert stored is not None
    assert b"4321" not in stored


def test_passcode_survives_new_gate(pin_gate, settings, settings_service, secret_dao):
    reopened = SecurityGate(settings, settings_service, secret_dao)
    assert reopened.has_passcode
    assert reopened.is_locked
    assert reopened.submit_pin("1234").success


@pytest.mark.parametrize("pin", ["123", "12345", "12a4", ""])
def test_set_passcode_requires_four_digits(gate, pin):
    with pytest.raises(ValueError):
        gate.set_passcode(pin)


def test_configure_validation(gate):
    with pytest.raises(ValueError, match="Set up a PIN"):
        gate.configure(use_pin=True)
    with pytest.raises(ValueError, match="at least one"):
        gate.configure(enabled=True, use_biometric=False, use_pin=False)


def test_configure_persists_flags(gate, settings_service):
    gate.configure(enabled=True, use_biometric=True)
    reloaded = settings_service.load()
    assert reloaded.app_lock_enabled
    assert reloaded.use_biometric


def test_disabling_lock_unlocks(pin_gate):
    pin_gate.configure(enabled=False)
    assert not pin_gate.is_locked


def test_background_and_inactive_lock_only_when_enabled(gate):
    gate.on_lifecycle(AppLifecycle.BACKGROUND)
    assert not gate.is_locked

    gate.configure(enabled=True, use_biometric=True)
    gate.on_lifecycle(AppLifecycle.ACTIVE)
    assert not gate.is_locked
    gate.on_lifecycle(AppLifecycle.INACTIVE)
    assert gate.is_locked
    assert not gate.is_authenticated


def test_listeners_fire_on_transitions_only(pin_gate):
    seen = []
    pin_gate.subscribe(seen.append)
    pin_gate.lock()                 # already locked
    pin_gate.submit_pin("9999")     # stays locked
    pin_gate.submit_pin("1234")
    pin_gate.on_lifecycle(AppLifecycle.BACKGROUND)
    assert seen == [LockState.UNLOCKED, LockState.LOCKED]


def test_clear_passcode_turns_off_pin(pin_gate, settings_service):
    pin_gate.configure(use_biometric=True)
    pin_gate.clear_passcode()
    assert not pin_gate.has_passcode
    assert not pin_gate.use_pin
    assert not settings_service.load().use_pin


def test_biometric_success_unlocks(settings, settings_service, secret_dao):
    gate, fake = _biometric_gate(settings, settings_service, secret_dao, BiometricResult(True))
    result = asyncio.run(gate.submit_biometric())
    assert result.success
    assert not gate.is_locked
    assert fake.reasons == [SecurityGate.UNLOCK_REASON]


def test_biometric_failure_surfaces_message(settings, settings_service, secret_dao):
    gate, _ = _biometric_gate(
        settings, settings_service, secret_dao,
        BiometricResult(False, available=True, error="Face not recognized."),
    )
    result = asyncio.run(gate.submit_biometric())
    assert not result.success
    assert result.reason == AuthFailure.BIOMETRIC_FAILED
    assert result.message == "Face not recognized."
    assert gate.is_locked


def test_biometric_unavailable(gate):
    gate.configure(enabled=True, use_biometric=True)
    gate.lock()
    result = asyncio.run(gate.submit_biometric())
    assert result.reason == AuthFailure.BIOMETRIC_UNAVAILABLE
    assert result.message == UnavailableBiometricAuthenticator.MESSAGE
    assert gate.is_locked
    assert not gate.biometric_available


def test_biometric_disabled(pin_gate):
    pin_gate.configure(use_biometric=False)
    result = asyncio.run(pin_gate.submit_biometric())
    assert result.reason == AuthFailure.DISABLED
    assert result.message == ""


def test_late_biometric_result_is_a_no_op_success(settings, settings_service, secret_dao):
    holder = {}
    gate, _ = _biometric_gate(
        settings, settings_service, secret_dao,
        BiometricResult(False, error="Cancelled"),
        before_return=lambda: holder["gate"].unlock(),
    )
    holder["gate"] = gate
    result = asyncio.run(gate.submit_biometric())
    assert result.success
    assert not gate.is_locked


# ── PIN setup ─────────────────────────────────────────────────────────────────

def _press_all(flow: PinSetupFlow, digits: str) -> PinSetupStep:
    step = flow.step
    for d in digits:
        step = flow.press(d)
    return step


def test_pin_setup_mismatch_resets_confirmation(gate):
    flow = PinSetupFlow(gate)
    assert _press_all(flow, "1234") == PinSetupStep.CONFIRM
    assert _press_all(flow, "1235") == PinSetupStep.CONFIRM
    assert flow.error == PinSetupFlow.MISMATCH_MESSAGE
    assert flow.second == ""
    assert flow.first == "1234"
    assert not gate.has_passcode

    assert _press_all(flow, "1234") == PinSetupStep.DONE
    assert gate.has_passcode


def test_pin_setup_delete_and_ignored_keys(gate):
    flow = PinSetupFlow(gate)
    _press_all(flow, "12")
    flow.delete()
    assert flow.current == "1"
    flow.press("x")
    assert flow.current == "1"


def test_configure_keeps_lock_off_when_save_fails(gate, db, settings, monkeypatch):
    def fail(values):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(db, "set_settings", fail)
    with pytest.raises(StoreError):
        gate.configure(enabled=True, use_biometric=True)
    assert not gate.enabled
    assert not settings.app_lock_enabled
    assert not gate.is_locked
