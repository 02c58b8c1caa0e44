__title__ = 'apprun'
__license__ = 'MIT'
__version__ = "0.1.0"

from .application import *
from .faults import *
from .loader import *
from .logs import getlogger, using, TRACE
from .parsing import *
from .tree import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
))

version_info = VersionInfo(0, 1, 0, "final", 0)

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info",
    "getlogger",
    "using",
    "TRACE",
)

# Load the exposed API of the application layer
__all__ += application.__all__  # type: ignore[name-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[name-defined]
# Load the exposed API of the config loader
__all__ += loader.__all__  # type: ignore[name-defined]
# Load the exposed API of the parser
__all__ += parsing.__all__  # type: ignore[name-defined]
# Load the exposed API of the configuration tree
__all__ += tree.__all__  # type: ignore[name-defined]
