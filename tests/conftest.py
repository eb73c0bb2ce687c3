"""Shared pytest fixtures.

Taichi is initialized once on the CPU backend before any field-backed module
is imported; the scene and render target fields are then reset around every
test so kernel tests never see a previous test's world.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Call ti.init once per session.

    Repeated ti.init calls discard every declared field, including the
    module-level scene fields, so the runtime is shared by all tests.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def reset_kernel_state():
    """Empty the uploaded scene and the color buffer before and after a test."""
    # Field-backed modules must be imported after ti.init
    from whitted.core.integrator import clear_render_target
    from whitted.scene.manager import clear_scene

    clear_scene()
    clear_render_target()
    yield
    clear_scene()
    clear_render_target()
