"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_slot_step_defaults_to_fifteen():
    assert Settings().SLOT_STEP_MINUTES == 15


@pytest.mark.parametrize("step", [0, -15])
def test_slot_step_must_be_positive(step):
    with pytest.raises(ValidationError):
        Settings(SLOT_STEP_MINUTES=step)


def test_slot_step_is_read_from_environment(monkeypatch):
    monkeypatch.setenv("SLOT_STEP_MINUTES", "30")
    assert Settings().SLOT_STEP_MINUTES == 30
