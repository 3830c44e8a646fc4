"""License harness – disposable sample projects for exercising a license scanner"""

__version__ = "0.1.0"

from .assertions import OutputAssertions
from .config import HarnessConfig, load_config
from .ecosystems import Dependency, Ecosystem, get_ecosystem, list_ecosystems
from .errors import (
    CommandFailure,
    ConfigurationError,
    HarnessError,
    LookupFailure,
    MissingCommandResult,
    PathEscapeError,
)
from .harness import Harness
from .runner import CommandResult, CommandRunner
from .sandbox import SandboxManager
from .scaffolder import ProjectScaffolder
from .structured import Fragment, StructuredOutput

__all__ = [
    # Facade
    "Harness",
    "HarnessConfig",
    "load_config",
    # Components
    "CommandResult",
    "CommandRunner",
    "SandboxManager",
    "ProjectScaffolder",
    "OutputAssertions",
    "StructuredOutput",
    "Fragment",
    # Ecosystems
    "Dependency",
    "Ecosystem",
    "get_ecosystem",
    "list_ecosystems",
    # Errors
    "HarnessError",
    "CommandFailure",
    "ConfigurationError",
    "PathEscapeError",
    "LookupFailure",
    "MissingCommandResult",
    "__version__",
]
