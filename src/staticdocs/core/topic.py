from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Final, FrozenSet, Iterable, NamedTuple, Optional, Sequence, Set, Tuple, TypedDict

from staticdocs.core.utils import SupportsJSON, topic_filename

INTERNAL_KEYWORD: Final[str] = 'internal'


class Visibility(str, Enum):
    INDEXED = 'indexed'
    INTERNAL = 'internal'

    @classmethod
    def from_keywords(cls, keywords: Iterable[str]) -> 'Visibility':
        '''
        Maps a topic's keywords to its site index visibility. The internal keyword is the
        only way to hide a topic.
        '''
        return cls.INTERNAL if INTERNAL_KEYWORD in set(keywords) else cls.INDEXED


@dataclass(frozen=True)
class TopicDocument:
    path: Path
    title: str = ''
    keywords: Tuple[str, ...] = ()
    sections: Tuple[Tuple[str, str], ...] = ()
    examples: str = ''

    def get_section(self, heading: str) -> Optional[str]:
        for name, text in self.sections:
            if name.casefold() == heading.casefold():
                return text
        return None


class TopicRecordJSONObject(TypedDict):
    name: str
    aliases: Sequence[str]
    title: str
    keywords: Sequence[str]
    in_index: bool
    output_file: str


@dataclass
class TopicRecord(SupportsJSON):
    name: str
    aliases: Tuple[str, ...]
    payload: Any = None
    title: str = ''
    keywords: Set[str] = field(default_factory=set)
    visibility: Visibility = Visibility.INDEXED
    output_file: str = ''

    def __post_init__(self) -> None:
        self.aliases = tuple(self.aliases)
        if not self.aliases:
            raise ValueError(f'Topic "{self.name}" must have at least one alias')
        if not all(isinstance(a, str) and a for a in self.aliases):
            raise ValueError(f'Aliases of topic "{self.name}" must be non-empty strings')
        if len(set(self.aliases)) != len(self.aliases):
            raise ValueError(f'Aliases of topic "{self.name}" must be unique')
        if not self.output_file:
            self.output_file = topic_filename(self.aliases[0])

    @property
    def in_index(self) -> bool:
        return self.visibility == Visibility.INDEXED

    def to_json(self) -> TopicRecordJSONObject:
        return {'name': self.name, 'aliases': list(self.aliases), 'title': self.title,
                'keywords': sorted(self.keywords), 'in_index': self.in_index,
                'output_file': self.output_file}


class IndexEntryJSONObject(TypedDict):
    alias: str
    output_file: str
    title: str
    in_index: bool


@dataclass
class IndexEntry(SupportsJSON):
    alias: str
    output_file: str
    title: str = ''
    visibility: Visibility = Visibility.INDEXED

    @property
    def in_index(self) -> bool:
        return self.visibility == Visibility.INDEXED

    def to_json(self) -> IndexEntryJSONObject:
        return {'alias': self.alias, 'output_file': self.output_file, 'title': self.title,
                'in_index': self.in_index}

    @classmethod
    def from_json(cls, json_obj: IndexEntryJSONObject) -> 'IndexEntry':
        return cls(json_obj['alias'], json_obj['output_file'], json_obj['title'],
                   Visibility.INDEXED if json_obj['in_index'] else Visibility.INTERNAL)


class RenderedTopic(NamedTuple):
    title: str
    keywords: FrozenSet[str]
    html: str

    @property
    def visibility(self) -> Visibility:
        return Visibility.from_keywords(self.keywords)


@dataclass(frozen=True)
class TopicResult:
    alias: str
    path: Path
    rendered: Optional[RenderedTopic] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
