"""
staticdocs generates a static HTML documentation site for a Python package
"""

import logging

from rich.logging import RichHandler

# Configure logger
logging.basicConfig(
    level=logging.INFO, format="%(message)s", datefmt="[%X]", handlers=[RichHandler()]
)
logger = logging.getLogger("staticdocs")


from staticdocs.builder import BuildConfig, BuildResult, build_index, build_package, build_topics
from staticdocs.core import TopicIndex, source
from staticdocs.package import PackageInfo, package_info

__version__ = "0.2.0"
__all__ = [
    "build_package",
    "build_topics",
    "build_index",
    "BuildConfig",
    "BuildResult",
    "TopicIndex",
    "PackageInfo",
    "package_info",
    "source",
]
