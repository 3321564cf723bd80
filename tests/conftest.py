#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import os
import logging

# Widgets render on the offscreen platform; must be set before Qt is loaded
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from moneyfield.core.sync_controller import SyncController
from moneyfield.core.value_engine import ValueEngine
from moneyfield.utils.config import NumericFieldConfig
from moneyfield.utils.logging import PACKAGE_LOGGER


# Helpers --------------------------------------------------------------------------------------------------------------

class PostRenderQueue:
    """Stand-in for the post-render scheduler; callbacks run only on demand."""

    def __init__(self):
        self.pending = []

    def __call__(self, callback):
        self.pending.append(callback)

    def run(self):
        pending, self.pending = self.pending, []
        for callback in pending:
            callback()


class SurfaceSpy:
    """Render surface recording every read-only class application."""

    def __init__(self):
        self.applied = []

    def apply_read_only_class(self, class_name):
        self.applied.append(class_name)


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def make_engine():
    """Build a ValueEngine from config props."""

    def _make(**props) -> ValueEngine:
        return ValueEngine(NumericFieldConfig(**props))

    return _make


@pytest.fixture
def post_render_queue() -> PostRenderQueue:
    return PostRenderQueue()


@pytest.fixture
def surface() -> SurfaceSpy:
    return SurfaceSpy()


@pytest.fixture
def make_controller(post_render_queue, surface):
    """Build a mounted SyncController recording its commits in controller.commits."""

    def _make(value="", read_only=False, mount=True, **props) -> SyncController:
        controller = SyncController(
            config=NumericFieldConfig(**props),
            value=value,
            read_only=read_only,
            surface=surface,
            scheduler=post_render_queue,
        )
        controller.commits = []
        controller.value_committed.connect(controller.commits.append)
        if mount:
            controller.mount()
        return controller

    return _make


@pytest.fixture
def reset_package_logger():
    """Remove handlers installed on the package logger by a test."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
