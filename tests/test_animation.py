from __future__ import annotations
import itertools
import random
import pytest
from ascii_clock.animation import (
    FlashState,
    apply_animation,
    hsl_to_rgb,
    is_colon_visible,
    rgb_to_hsl,
)
from ascii_clock.themes import AnimationSpeed, AnimationStyle

CHANNELS = list(range(0, 256, 7)) + [254, 255]


def close(a, b, tolerance: int = 1) -> bool:
    return all(abs(x - y) <= tolerance for x, y in zip(a, b))


def test_hsl_round_trip() -> None:
    for rgb in itertools.product(CHANNELS, repeat=3):
        assert close(hsl_to_rgb(*rgb_to_hsl(*rgb)), rgb), rgb


@pytest.mark.parametrize("fixed", [0, 1, 128, 254, 255])
def test_hsl_round_trip_full_channel_sweep(fixed: int) -> None:
    for rgb in itertools.product(range(256), range(256), [fixed]):
        assert close(hsl_to_rgb(*rgb_to_hsl(*rgb)), rgb), rgb


def test_hsl_round_trip_random_sample() -> None:
    rng = random.Random(20240102)
    for _ in range(50_000):
        rgb = (rng.randrange(256), rng.randrange(256), rng.randrange(256))
        assert close(hsl_to_rgb(*rgb_to_hsl(*rgb)), rgb), rgb


@pytest.mark.parametrize(
    "rgb, hsl",
    [
        ((255, 0, 0), (0.0, 1.0, 0.5)),
        ((0, 255, 0), (120.0, 1.0, 0.5)),
        ((0, 0, 255), (240.0, 1.0, 0.5)),
        ((255, 255, 255), (0.0, 0.0, 1.0)),
        ((0, 0, 0), (0.0, 0.0, 0.0)),
    ],
)
def test_rgb_to_hsl_reference_values(rgb, hsl) -> None:
    assert rgb_to_hsl(*rgb) == pytest.approx(hsl)


def test_hsl_to_rgb_wraps_hue_and_clamps() -> None:
    assert hsl_to_rgb(360.0, 1.0, 0.5) == (255, 0, 0)
    assert hsl_to_rgb(-120.0, 1.0, 0.5) == (0, 0, 255)
    assert hsl_to_rgb(0.0, 2.0, 1.5) == (255, 255, 255)


@pytest.mark.parametrize("speed", list(AnimationSpeed))
def test_none_is_identity(speed) -> None:
    assert apply_animation((12, 34, 56), AnimationStyle.NONE, speed, 12345, 3, 10, 0.8) == (12, 34, 56)


def test_reactive_clamps_to_255() -> None:
    assert apply_animation((200, 100, 0), AnimationStyle.REACTIVE, AnimationSpeed.MEDIUM, 0, stimulus=1.0) == (
        255,
        200,
        0,
    )


def test_reactive_without_stimulus_is_identity() -> None:
    assert apply_animation((200, 100, 5), AnimationStyle.REACTIVE, AnimationSpeed.FAST, 999, stimulus=0.0) == (
        200,
        100,
        5,
    )


def test_reactive_stimulus_is_clamped() -> None:
    over = apply_animation((100, 50, 10), AnimationStyle.REACTIVE, AnimationSpeed.SLOW, 0, stimulus=5.0)
    assert over == (200, 100, 20)
    under = apply_animation((100, 50, 10), AnimationStyle.REACTIVE, AnimationSpeed.SLOW, 0, stimulus=-1.0)
    assert under == (100, 50, 10)


def test_pulsing_range() -> None:
    period = AnimationSpeed.MEDIUM.profile.pulse_period_ms
    peak = apply_animation((200, 200, 200), AnimationStyle.PULSING, AnimationSpeed.MEDIUM, period // 4)
    trough = apply_animation((200, 200, 200), AnimationStyle.PULSING, AnimationSpeed.MEDIUM, period * 3 // 4)
    assert close(peak, (200, 200, 200))
    assert close(trough, (60, 60, 60))
    for elapsed in range(0, period, 50):
        r, g, b = apply_animation((200, 100, 50), AnimationStyle.PULSING, AnimationSpeed.MEDIUM, elapsed)
        assert 59 <= r <= 200 and g <= 100 and b <= 50


def test_pulsing_is_periodic() -> None:
    speed = AnimationSpeed.FAST
    period = speed.profile.pulse_period_ms
    first = apply_animation((90, 180, 30), AnimationStyle.PULSING, speed, 123)
    assert apply_animation((90, 180, 30), AnimationStyle.PULSING, speed, 123 + period * 7) == first


def test_wave_depends_on_position() -> None:
    speed = AnimationSpeed.SLOW
    start = apply_animation((100, 100, 100), AnimationStyle.WAVE, speed, 0, 0, 40)
    crest = apply_animation((100, 100, 100), AnimationStyle.WAVE, speed, 0, 10, 40)
    trough = apply_animation((100, 100, 100), AnimationStyle.WAVE, speed, 0, 30, 40)
    assert close(start, (60, 60, 60))
    assert close(crest, (100, 100, 100))
    assert close(trough, (20, 20, 20))


def test_wave_with_zero_width() -> None:
    assert close(apply_animation((100, 100, 100), AnimationStyle.WAVE, AnimationSpeed.FAST, 0, 5, 0), (60, 60, 60))


def test_shifting_rotates_hue() -> None:
    speed = AnimationSpeed.MEDIUM
    cycle = speed.profile.shift_cycle_ms
    assert close(apply_animation((255, 0, 0), AnimationStyle.SHIFTING, speed, 0), (255, 0, 0))
    assert close(apply_animation((255, 0, 0), AnimationStyle.SHIFTING, speed, cycle // 2), (0, 255, 255))
    assert close(apply_animation((255, 0, 0), AnimationStyle.SHIFTING, speed, cycle // 3), (0, 255, 0))
    assert close(apply_animation((255, 0, 0), AnimationStyle.SHIFTING, speed, cycle), (255, 0, 0))


def test_shifting_keeps_grey_grey() -> None:
    assert close(apply_animation((128, 128, 128), AnimationStyle.SHIFTING, AnimationSpeed.FAST, 2500), (128, 128, 128))


def test_colon_blink_duty_cycle() -> None:
    for base in (0, 1000, 86_400_000):
        for offset in range(1000):
            assert is_colon_visible(base + offset) is (offset < 500)


def test_flash_first_update_only_records_time() -> None:
    state = FlashState()
    assert state.update(10, 20, 30, 0, AnimationSpeed.MEDIUM) == 0.0
    assert state.flash_start_ms is None


@pytest.mark.parametrize(
    "tick, expected",
    [
        ((10, 20, 31), 0.3),
        ((10, 21, 0), 0.7),
        ((11, 0, 0), 1.0),
    ],
)
def test_flash_intensity_by_unit(tick, expected) -> None:
    state = FlashState()
    state.update(10, 20, 30, 0, AnimationSpeed.MEDIUM)
    assert state.update(*tick, 1000, AnimationSpeed.MEDIUM) == pytest.approx(expected)


def test_flash_decays_to_zero() -> None:
    speed = AnimationSpeed.FAST
    state = FlashState()
    state.update(10, 20, 30, 0, speed)
    state.update(10, 21, 0, 1000, speed)
    halfway = state.update(10, 21, 0, 1000 + speed.profile.flash_decay_ms // 2, speed)
    assert 0.0 < halfway < 0.7
    assert state.update(10, 21, 0, 1000 + speed.profile.flash_decay_ms, speed) == 0.0
    assert state.flash_start_ms is None
