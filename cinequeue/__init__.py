"""CineQueue: movie and TV watchlist service."""

from cinequeue.config.settings import CineQueueConfig, get_config
from cinequeue.utils.logging import Logger, get_logger
from cinequeue.utils.terminal import supports_utf8
from cinequeue.utils.version import get_git_hash, get_pyproject_version

__author__ = "CineQueue contributors"
__license__ = "MIT"
__version__ = get_pyproject_version()
__git_hash__ = get_git_hash()

if supports_utf8():
    CINEQUEUE_HEADER = f"""
╔═══════════════════════════════════════════════════════════════════════════════╗
║                               C I N E Q U E U E                               ║
╠═══════════════════════════════════════════════════════════════════════════════╣
║  Version: {__version__:<68}║
║  Git Hash: {__git_hash__:<67}║
║  License: {__license__:<68}║
╚═══════════════════════════════════════════════════════════════════════════════╝
    """.strip()
else:
    CINEQUEUE_HEADER = f"""
+-------------------------------------------------------------------------------+
|                               C I N E Q U E U E                               |
+-------------------------------------------------------------------------------+
|  Version: {__version__:<68}|
|  Git Hash: {__git_hash__:<67}|
|  License: {__license__:<68}|
+-------------------------------------------------------------------------------+
    """.strip()

config: CineQueueConfig = get_config()
log: Logger = get_logger()
