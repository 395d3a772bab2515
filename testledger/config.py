"""Program configuration.

Configuration values are looked up in this order, first match wins:
1. overrides given on the command line with --set NAME=VALUE
2. the user's config file, a Python source file (see config_file())
3. the defaults in configdef.py

Values may refer to environment variables and other config values with {NAME} which is
expanded by expand(). Run metadata provided by the CI job is read from the process environment
directly with getenv() instead.
"""

import contextlib
import functools
import importlib.machinery
import importlib.util
import logging
import os
import sys
from types import ModuleType
from typing import Any, Optional

from testledger import configdef


# Name of the config file in the config directory
CONFIG_FILE = 'testledgerrc'

# Environment variable holding the path of a config file to use instead of the default one
CONFIG_ENV = 'TESTLEDGER_CONFIG'

# The loaded config file
config_module = None

# Config variables that override all others
overrides = {}


def config_dir() -> str:
    """Return the XDG directory holding the config file."""
    if 'XDG_CONFIG_HOME' in os.environ:
        return os.environ['XDG_CONFIG_HOME']
    if 'HOME' in os.environ:
        return os.path.join(os.environ['HOME'], '.config')
    return '.'


def config_file() -> str:
    """Return the path of the config file, which need not exist.

    CI jobs usually keep their config in the repository, so they may point to it with
    $TESTLEDGER_CONFIG.
    """
    return os.environ.get(CONFIG_ENV) or os.path.join(config_dir(), CONFIG_FILE)


def is_known(var: str) -> bool:
    """Return whether var is a config variable with a default."""
    return not var.startswith('_') and hasattr(configdef, var)


def environ() -> dict[str, Any]:
    """Return the namespace used to expand config values.

    Config values shadow environment variables of the same name, so a stray environment
    variable can't change a configured value.
    """
    env = {**os.environ, **configdef.__dict__, **config().__dict__, **overrides}
    env.setdefault('XDG_CONFIG_HOME', config_dir())
    return env


def expandstr(var: str) -> str:
    return var.format(**environ())


@functools.lru_cache(maxsize=None)
def expand(var: str) -> str:
    """Return a config value with its {NAME} references expanded."""
    return expandstr(get(var))


@functools.lru_cache(maxsize=None)
def get(var: str) -> Any:
    """Return a config value as is."""
    return environ()[var]


def getenv(var: str, default: Optional[str] = None) -> Optional[str]:
    """Return a variable from the process environment.

    This is not cached, since the CI job may change run metadata between runs in one process.
    An empty value counts as missing.
    """
    return os.environ.get(var) or default


def getenv_int(var: str) -> Optional[int]:
    """Return an integer from the process environment, or None if missing or not a number."""
    val = getenv(var)
    if val is None:
        return None
    try:
        return int(val)
    except ValueError:
        logging.warning('Ignoring non-numeric value for %s: %s', var, val)
        return None


@contextlib.contextmanager
def override_var(obj, name: str, value: Any):
    """Temporarily set an attribute of obj within a with block."""
    saved_value = getattr(obj, name)
    setattr(obj, name, value)
    try:
        yield saved_value
    finally:
        setattr(obj, name, saved_value)


def load_config_file(fn: str) -> ModuleType:
    """Execute a config file and return it as a module."""
    spec = importlib.util.spec_from_loader(
        'testledgerrc', importlib.machinery.SourceFileLoader('testledgerrc', fn))
    if not spec:
        raise ImportError(f'Cannot load config file {fn}')
    module = importlib.util.module_from_spec(spec)
    # A stale bytecode file next to the config file would hide edits to it
    with override_var(sys, 'dont_write_bytecode', True):
        spec.loader.exec_module(module)
    return module


def config() -> ModuleType:
    """Return the config file as a module, loading it on first use."""
    global config_module
    if config_module:
        return config_module

    configfn = config_file()
    if os.access(configfn, os.R_OK):
        logging.debug('Loading configuration file %s', configfn)
        config_module = load_config_file(configfn)
        for name, value in vars(config_module).items():
            if (not name.startswith('_') and not isinstance(value, ModuleType)
                    and not is_known(name)):
                logging.warning('Unknown variable %s in %s', name, configfn)
    else:
        logging.info('Configuration file %s not found', configfn)
        config_module = ModuleType('empty')

    return config_module  # noqa: R504


def add_override(name: str, value: Any):
    """Set a config value that takes precedence over all others."""
    overrides[name] = value
    # Values may already have been cached before the override arrived
    get.cache_clear()
    expand.cache_clear()
