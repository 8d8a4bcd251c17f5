__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argosy'
__license__ = 'MIT'
# Kept in sync with pyproject.toml.
__version__ = "0.1.0"

from .actors import *
from .arguments import *
from .commands import *
from .config import *
from .descriptors import *
from .dispatcher import *
from .faults import *
from .messaging import *
from .permissions import *
from .registry import *
from .resolver import *
from .usage import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Kept in sync with pyproject.toml.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the actors
__all__ += actors.__all__  # type: ignore[attr-defined]
# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the config
__all__ += config.__all__  # type: ignore[attr-defined]
# Load the exposed API of the descriptors
__all__ += descriptors.__all__  # type: ignore[attr-defined]
# Load the exposed API of the dispatcher
__all__ += dispatcher.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the messaging
__all__ += messaging.__all__  # type: ignore[attr-defined]
# Load the exposed API of the permissions
__all__ += permissions.__all__  # type: ignore[attr-defined]
# Load the exposed API of the registry
__all__ += registry.__all__  # type: ignore[attr-defined]
# Load the exposed API of the resolver
__all__ += resolver.__all__  # type: ignore[attr-defined]
# Load the exposed API of the usage
__all__ += usage.__all__  # type: ignore[attr-defined]
