"""Deterministic per-pixel random numbers for jitter and lens sampling.

Each pixel sample derives its own random stream by hashing the render
seed, the pixel coordinates and the sample index. Results therefore do not
depend on thread scheduling, and repeated renders of the same scene with
the same seed produce identical buffers.

The hash is Thomas Wang's 32-bit integer hash; every multiplication wraps
modulo 2^32.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import real, vec2

_U32_RANGE = 4294967296.0


@ti.func
def wang_hash(key: ti.u32) -> ti.u32:
    """Scramble a 32-bit integer."""
    h = (key ^ ti.cast(61, ti.u32)) ^ (key >> ti.cast(16, ti.u32))
    h *= ti.cast(9, ti.u32)
    h = h ^ (h >> ti.cast(4, ti.u32))
    h *= ti.cast(0x27D4EB2D, ti.u32)
    h = h ^ (h >> ti.cast(15, ti.u32))
    return h


@ti.func
def seed_sample(pixel_x: ti.i32, pixel_y: ti.i32, sample_index: ti.i32, seed: ti.i32) -> ti.u32:
    """Derive the initial random state for one pixel sample."""
    state = wang_hash(ti.cast(seed, ti.u32))
    state = wang_hash(state ^ ti.cast(pixel_x, ti.u32))
    state = wang_hash(state ^ ti.cast(pixel_y, ti.u32))
    state = wang_hash(state ^ ti.cast(sample_index, ti.u32))
    return state


@ti.func
def next_random(state: ti.u32):
    """Advance the random state.

    Returns:
        A tuple (new_state, value) with value uniform in [0, 1).
    """
    new_state = wang_hash(state)
    value = ti.cast(new_state, real) / _U32_RANGE
    return new_state, value


@ti.func
def sample_unit_disk(u1: real, u2: real) -> vec2:
    """Map two uniforms in [0, 1) to a point in the unit disk.

    Uses the polar mapping r = sqrt(u1), theta = 2 pi u2, which is area
    preserving and needs no rejection loop.
    """
    r = ti.sqrt(u1)
    theta = 2.0 * tm.pi * u2
    return vec2(r * ti.cos(theta), r * ti.sin(theta))
