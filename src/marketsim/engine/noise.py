"""Smoothstep-interpolated value noise.

Each stream is keyed by ``seed ^ channel`` and split into buckets of ``period``
seconds. Bucket edges get a hashed value and positions in between blend the two
neighbours with a smoothstep curve, so the stream is continuous in ``t``.
"""

from __future__ import annotations

import math

from marketsim.engine.hashing import MASK32, signed_mix2

# Noise channels. Distinct constants decorrelate streams drawn from one seed.
CHANNEL_HOUR = 0x1001
CHANNEL_TEN_MINUTE = 0x2002
CHANNEL_MINUTE = 0x3003
CHANNEL_TEN_SECOND = 0x4004
CHANNEL_DAY_WALK = 0x44455455
CHANNEL_DAY_VOLUME = 0xAABBCC
CHANNEL_MINUTE_VOLUME = 0x001122


def smoothstep(frac: float) -> float:
    """Cubic Hermite easing of a fraction in [0, 1]."""
    return frac * frac * (3 - 2 * frac)


def smooth_noise(seed: int, channel: int, t: float, period: float) -> float:
    """Sample a noise stream.

    :param seed: Per-symbol seed from :func:`symbol_seed`.
    :param channel: Stream discriminator.
    :param t: Absolute time coordinate in seconds.
    :param period: Bucket size in seconds.
    :returns: Value in [-1, 1].
    """
    b0 = math.floor(t / period)
    frac = (t - b0 * period) / period
    key = (seed ^ channel) & MASK32
    v0 = signed_mix2(key, b0)
    v1 = signed_mix2(key, b0 + 1)
    return v0 + (v1 - v0) * smoothstep(frac)
