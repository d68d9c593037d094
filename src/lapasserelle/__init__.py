"""LaPasserelle - Table de redirections entre l'ancien et le nouveau site."""

from lapasserelle.config import ConfigError, ConfigFileError, LaPasserelleError
from lapasserelle.io_records import EmptyInputError, FetchError, InputError, InputNotFoundError

__all__ = [
    "__version__",
    "LaPasserelleError",
    "ConfigError",
    "ConfigFileError",
    "InputError",
    "InputNotFoundError",
    "FetchError",
    "EmptyInputError",
]

__version__ = "0.1.0"
