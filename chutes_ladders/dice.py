"""Die tumbling schedule and face layout.

The outcome of a roll is drawn once, up front. Everything here only decides
which face to *show* while the die tumbles toward that outcome.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

FACES = 6

# Probability of showing the final value at each tumble step.
# Steps 0–2 are pure noise, 5–6 always show the outcome.
FINAL_FACE_BIAS: tuple[float, ...] = (0.0, 0.0, 0.0, 0.6, 0.9, 1.0, 1.0)


def draw(rng: random.Random) -> int:
    return rng.randint(1, FACES)


def tumble_face(final: int, bias: float, rng: random.Random) -> int:
    """Pick the face for one tumble step."""
    if bias >= 1.0:
        return final
    if bias > 0.0 and rng.random() < bias:
        return final
    return draw(rng)


def face_sequence(final: int, rng: random.Random) -> list[int]:
    """Faces shown during one roll, ending on *final*."""
    return [tumble_face(final, bias, rng) for bias in FINAL_FACE_BIAS]


# ── 3-D die layout ───────────────────────────────────────────────────

# fmt: off
_RIGHT  = {1: 2, 2: 3, 3: 6, 4: 1, 5: 4, 6: 5}
_LEFT   = {1: 5, 2: 4, 3: 1, 4: 6, 5: 3, 6: 2}
_TOP    = {1: 3, 2: 1, 3: 2, 4: 5, 5: 6, 6: 4}
_BOTTOM = {1: 4, 2: 6, 3: 5, 4: 2, 5: 1, 6: 3}
# fmt: on


@dataclass(frozen=True)
class DiceFaces:
    front: int
    back: int
    right: int
    left: int
    top: int
    bottom: int


def dice_faces(value: int) -> DiceFaces:
    """All six faces of a die showing *value* at the front.

    Opposite faces sum to 7 and every face appears exactly once.
    """
    if not 1 <= value <= FACES:
        raise ValueError(f"Die value must be 1..{FACES}, got {value}.")
    return DiceFaces(
        front=value,
        back=FACES + 1 - value,
        right=_RIGHT[value],
        left=_LEFT[value],
        top=_TOP[value],
        bottom=_BOTTOM[value],
    )
