"""Core domain types: configuration, ignore patterns, version resolution."""

from .config import AppSpec, ConfigError, ExternEntry, ReleaseConfig, load_config
from .errors import ErrorCode
from .ignore import IgnoreFileError, IgnoreList, load_ignore_list
from .result import Err, Ok, Result
from .version import ResolvedVersion, resolve_version

__all__ = [
    # config
    "AppSpec",
    "ConfigError",
    "ExternEntry",
    "ReleaseConfig",
    "load_config",
    # errors
    "ErrorCode",
    # ignore
    "IgnoreFileError",
    "IgnoreList",
    "load_ignore_list",
    # result
    "Err",
    "Ok",
    "Result",
    # version
    "ResolvedVersion",
    "resolve_version",
]
