# Common utilities
from vingd.common.config import Config as Config
from vingd.common.crypto import CryptoUtils as CryptoUtils
from vingd.common.logging_utils import setup_logger as setup_logger
from vingd.common.mixins import Configurable as Configurable
from vingd.common.safeformat import safeformat as safeformat

__all__ = ["Config", "Configurable", "CryptoUtils", "safeformat", "setup_logger"]
