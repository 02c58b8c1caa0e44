"""
apprun lifecycle: one-time preparation versus repeated execution.

States
    UNINITIALIZED --prepare()--> PREPARED --executing()--> EXECUTING
                                    ^                          |
                                    +--------------------------+

prepare() runs once per wrapper, lazily before the first execution:
1. load the config file when option `config` is present (not None);
2. enable the logger from options `logger` and `loglevel`;
3. call the application's init(options), if it has one, with the logger active.

A failing step leaves the state UNINITIALIZED and propagates the error, so a
later execution retries. There is no way back to UNINITIALIZED once prepared.
"""
import contextlib
import logging
from enum import Enum

from .logs import using

log = logging.getLogger(__name__)


class State(Enum):
    UNINITIALIZED = "uninitialized"
    PREPARED = "prepared"
    EXECUTING = "executing"


class Lifecycle:
    """
    Preparation state machine of one App.

    `owner` is the App instance; it provides options, app, load_config(),
    enable_logger() and logger().
    """

    def __init__(self, owner, /):
        self._owner = owner
        self._state = State.UNINITIALIZED

    @property
    def state(self):
        return self._state

    @property
    def prepared(self):
        return self._state is not State.UNINITIALIZED

    def prepare(self):
        """
        Run the preparation steps once; later calls are no-ops.
        """
        if self.prepared:
            return False

        owner = self._owner
        source = owner.options.get("config")
        if source is not None:
            owner.load_config(source)

        logger = owner.enable_logger()

        init = getattr(owner.app, "init", None)
        if callable(init) and not isinstance(owner.app, type):
            with using(logger):
                init(owner.options)

        self._state = State.PREPARED
        log.debug("prepared %s", owner.name)
        return True

    @contextlib.contextmanager
    def executing(self):
        """
        Mark one invocation; preparation happens first when still needed.
        """
        self.prepare()
        previous, self._state = self._state, State.EXECUTING
        try:
            yield
        finally:
            self._state = previous


__all__ = (
    "State",
    "Lifecycle",
)
