'''
Package metadata and site configuration, read from the package's `pyproject.toml`.
'''

from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
from pathlib import Path
import sys
import tomllib
from typing import Any, Dict, Generator, List, NamedTuple, Optional, TypedDict

from staticdocs.core.utils import PathLike
from staticdocs.exceptions import BuildError

logger = logging.getLogger('staticdocs')


class SiteLinkJSONObject(TypedDict):
    filename: str
    title: str


class SiteLink(NamedTuple):
    filename: str
    title: str

    def to_json(self) -> SiteLinkJSONObject:
        return {'filename': self.filename, 'title': self.title}


@dataclass
class PackageInfo:
    name: str
    path: Path
    base_path: Path
    version: str = ''
    description: str = ''
    authors: List[str] = field(default_factory=list)
    urls: Dict[str, str] = field(default_factory=dict)
    examples: bool = True
    topic_dir: Path = Path('man')
    templates_path: Optional[Path] = None
    vignettes: Optional[List[SiteLink]] = None
    demos: Optional[List[SiteLink]] = None
    readme: Optional[str] = None

    @property
    def import_path(self) -> Path:
        '''
        Directory the package is importable from, `src/` for src layouts.
        '''
        src = self.path / 'src'
        return src if src.is_dir() else self.path


def read_pyproject(path: Path) -> Dict[str, Any]:
    pyproject = path / 'pyproject.toml'
    if not pyproject.is_file():
        logger.debug(f'No pyproject.toml found in "{path}"')
        return {}
    try:
        with open(pyproject, 'rb') as file:
            return tomllib.load(file)
    except tomllib.TOMLDecodeError as e:
        raise BuildError(f'Could not read "{pyproject}": {e}') from e


def _format_author(author: Any) -> str:
    if isinstance(author, dict):
        name, email = author.get('name'), author.get('email')
        return f'{name} <{email}>' if name and email else str(name or email or '')
    return str(author)


def package_info(path: PathLike, base_path: Optional[PathLike] = None,
                 examples: Optional[bool] = None) -> PackageInfo:
    '''
    Collects the metadata of a package.

    Parameters:
        path: Root directory of the package.
        base_path: Directory to create the site in. Defaults to `base-path` in
            `[tool.staticdocs]`, then to `<path>/web`.
        examples: Whether to evaluate examples. Defaults to `examples` in `[tool.staticdocs]`,
            then to `True`.

    Returns:
        The package's metadata and site settings.
    '''
    path = Path(path).resolve()
    pyproject = read_pyproject(path)
    project: Dict[str, Any] = pyproject.get('project', {})
    settings: Dict[str, Any] = pyproject.get('tool', {}).get('staticdocs', {})
    if base_path is None:
        base_path = path / settings.get('base-path', 'web')
    if examples is None:
        examples = bool(settings.get('examples', True))
    templates = settings.get('templates')
    return PackageInfo(name=project.get('name', path.name), path=path,
                       base_path=Path(base_path),
                       version=str(project.get('version', '')),
                       description=project.get('description', ''),
                       authors=[_format_author(a) for a in project.get('authors', [])],
                       urls=dict(project.get('urls', {})),
                       examples=examples,
                       topic_dir=Path(settings.get('topic-dir', 'man')),
                       templates_path=path / templates if templates else None)


@contextmanager
def load_package(package: PackageInfo) -> Generator[None, None, None]:
    '''
    Makes the package importable from examples and demos while the site is built.
    '''
    import_path = str(package.import_path)
    sys.path.insert(0, import_path)
    logger.debug(f'Added "{import_path}" to the import path')
    try:
        yield
    finally:
        try:
            sys.path.remove(import_path)
        except ValueError:
            logger.debug(f'"{import_path}" was already removed from the import path')
