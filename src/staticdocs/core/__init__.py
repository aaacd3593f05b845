"""
Core functionality of staticdocs.
"""

from staticdocs.core import source
from staticdocs.core.evaluate import ExampleContext, ExampleOutput
from staticdocs.core.index import TopicIndex, build_canonical_set
from staticdocs.core.render import Renderer
from staticdocs.core.source import TopicSource
from staticdocs.core.topic import (IndexEntry, RenderedTopic, TopicDocument, TopicRecord,
                                   TopicResult, Visibility)

__all__ = [
    "IndexEntry",
    "TopicRecord",
    "TopicDocument",
    "RenderedTopic",
    "TopicResult",
    "Visibility",
    "TopicIndex",
    "build_canonical_set",
    "ExampleContext",
    "ExampleOutput",
    "Renderer",
    "source",
    "TopicSource",
]
