"""
Topic source for Markdown topic files with YAML front matter.
"""

import logging
from pathlib import Path
import re
from typing import Any, Dict, Final, List, Sequence, Tuple

import yaml

from staticdocs.core.source import TopicSource
from staticdocs.core.topic import TopicDocument, TopicRecord
from staticdocs.core.utils import PathLike
from staticdocs.exceptions import TopicParsingError

logger = logging.getLogger('staticdocs')

FRONT_MATTER: Final[re.Pattern[str]] = re.compile(r'\A---[ \t]*\n(.*?\n)?---[ \t]*(?:\n|\Z)',
                                                  re.DOTALL)
"""
Leading `---` delimited YAML block.
"""
FENCED_CODE: Final[re.Pattern[str]] = re.compile(r'^[ \t]*(```|~~~)[^\n]*\n(.*?)^[ \t]*\1[ \t]*$',
                                                 re.MULTILINE | re.DOTALL)
EXAMPLES_SECTION: Final[str] = 'Examples'


def _as_strings(value: Any, field: str, file: Path) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(',') if v.strip()]
    if isinstance(value, list) and all(isinstance(v, (str, int, float)) for v in value):
        return [str(v) for v in value]
    raise TopicParsingError(f'"{field}" in {file.name} must be a string or a list of strings')


def split_front_matter(text: str, file: Path) -> Tuple[Dict[str, Any], str]:
    match = FRONT_MATTER.match(text)
    if not match:
        return {}, text
    try:
        metadata = yaml.safe_load(match.group(1) or '') or {}
    except yaml.YAMLError as e:
        raise TopicParsingError(f'Invalid front matter in {file.name}: {e}') from e
    if not isinstance(metadata, dict):
        raise TopicParsingError(f'Front matter of {file.name} must be a mapping')
    return metadata, text[match.end():]


def split_sections(body: str) -> Tuple[List[str], List[Tuple[str, List[str]]]]:
    '''
    Splits a topic body at its level two headings, ignoring headings inside code blocks.

    Parameters:
        body: Markdown body without front matter.

    Returns:
        The lines before the first section and the ordered `(heading, lines)` sections.
    '''
    preamble: List[str] = []
    sections: List[Tuple[str, List[str]]] = []
    current = preamble
    fence = None
    for line in body.splitlines():
        stripped = line.lstrip()
        if fence:
            if stripped.startswith(fence):
                fence = None
        elif stripped.startswith(('```', '~~~')):
            fence = stripped[:3]
        elif line.startswith('## '):
            current = []
            sections.append((line[3:].strip().rstrip('#').strip(), current))
            continue
        current.append(line)
    return preamble, sections


def extract_code(text: str) -> str:
    blocks = [m.group(2) for m in FENCED_CODE.finditer(text)]
    if not blocks:
        return text.strip('\n')
    return '\n'.join(b.rstrip('\n') for b in blocks)


class MarkdownTopicSource(TopicSource):
    """
    Reads topics from the `*.md` files of a topic directory, one topic per file.
    """

    def get_source_files(self, path: PathLike) -> Sequence[Path]:
        directory = Path(path)
        if not directory.is_dir():
            logger.info(f'No topic directory found at "{directory}"')
            return []
        return sorted(p for p in directory.glob('*.md') if p.is_file())

    def parse(self, file: PathLike) -> TopicRecord:
        file = Path(file)
        try:
            text = file.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise TopicParsingError(f'{file.name} is not valid UTF-8') from e
        metadata, body = split_front_matter(text, file)
        preamble, sections = split_sections(body)
        title = str(metadata.get('title') or '').strip()
        if not title:
            title = next((line[2:].strip() for line in preamble if line.startswith('# ')), '')
        examples = ''
        rendered_sections: List[Tuple[str, str]] = []
        for heading, lines in sections:
            text = '\n'.join(lines).strip('\n')
            if heading.casefold() == EXAMPLES_SECTION.casefold():
                examples = extract_code(text)
            else:
                rendered_sections.append((heading, text))
        description = '\n'.join(line for line in preamble
                                if not line.startswith('# ')).strip('\n')
        if description:
            rendered_sections.insert(0, ('', description))
        keywords = _as_strings(metadata.get('keywords'), 'keywords', file)
        aliases = _as_strings(metadata.get('aliases'), 'aliases', file) or [file.stem]
        document = TopicDocument(file, title, tuple(keywords), tuple(rendered_sections),
                                 examples)
        try:
            return TopicRecord(file.stem, tuple(aliases), payload=document)
        except ValueError as e:
            raise TopicParsingError(str(e)) from e
