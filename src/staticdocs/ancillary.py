'''
Builders for the pages that live outside the topic index: vignettes, demos and the README.
'''

from abc import ABC, abstractmethod
import logging
from pathlib import Path
import re
from typing import Final, List, Optional, Tuple

from staticdocs.core.evaluate import ExampleContext
from staticdocs.core.render import Renderer, to_html
from staticdocs.core.utils import write_page
from staticdocs.exceptions import ExampleError, StaticDocsError
from staticdocs.package import PackageInfo, SiteLink

logger = logging.getLogger('staticdocs')

VIGNETTE_DIRS: Final[Tuple[str, ...]] = ('vignettes', 'doc')
VIGNETTE_INDEX_ENTRY: Final[re.Pattern[str]] = re.compile(r'\\VignetteIndexEntry\{(.*?)\}')
DEMO_INDEX: Final[str] = '00Index'
DEMO_PAGES: Final[str] = 'demos'


class VignetteCompiler(ABC):

    @abstractmethod
    def compile(self, path: Path) -> str:
        '''
        Compiles a vignette source into the HTML body of its page.
        '''
        pass


class MarkdownVignetteCompiler(VignetteCompiler):

    def compile(self, path: Path) -> str:
        return str(to_html(path.read_text(encoding='utf-8')))


def vignette_title(path: Path) -> str:
    contents = path.read_text(encoding='utf-8')
    match = VIGNETTE_INDEX_ENTRY.search(contents)
    if match:
        return match.group(1).strip()
    heading = next((line[2:].strip() for line in contents.splitlines()
                    if line.startswith('# ')), None)
    return heading or path.stem


def find_vignettes(package: PackageInfo) -> List[Path]:
    return sorted(p for d in VIGNETTE_DIRS for p in (package.path / d).glob('*.md')
                  if p.is_file())


def build_vignettes(package: PackageInfo, renderer: Renderer,
                    compiler: Optional[VignetteCompiler] = None) -> Optional[List[SiteLink]]:
    '''
    Compiles every vignette of a package into `<base_path>/vignettes`.

    Parameters:
        package: The package being documented.
        renderer: Renderer for the vignette pages.
        compiler: Vignette compiler, Markdown by default.

    Returns:
        The file name (relative to the site root) and title of every vignette, or `None` if the
        package has no vignettes.
    '''
    paths = find_vignettes(package)
    if not paths:
        return None
    if compiler is None:
        compiler = MarkdownVignetteCompiler()
    logger.info('Building vignettes')
    dest = package.base_path / 'vignettes'
    dest.mkdir(exist_ok=True)
    vignettes: List[SiteLink] = []
    for path in paths:
        title = vignette_title(path)
        filename = f'{path.stem}.html'
        write_page(dest / filename,
                   renderer.render_vignette(title, compiler.compile(path), package))
        vignettes.append(SiteLink(f'vignettes/{filename}', title))
    return vignettes


def read_demo_index(path: Path) -> List[Tuple[str, str]]:
    demos: List[Tuple[str, str]] = []
    for line in path.read_text(encoding='utf-8').splitlines():
        if not line.strip():
            continue
        name, *title = line.strip().split(maxsplit=1)
        demos.append((name, title[0].strip() if title else name))
    return demos


def build_demos(package: PackageInfo, renderer: Renderer,
                stop_on_error: bool = False) -> Optional[List[SiteLink]]:
    '''
    Runs and renders every demo listed in `demo/00Index` into `<base_path>/demos`.

    Parameters:
        package: The package being documented.
        renderer: Renderer for the demo pages.
        stop_on_error: Raise on the first failing demo statement.

    Returns:
        The file name (relative to the site root) and title of every demo, or `None` if the
        package has no demo index. Demos that could not be built are left out.
    '''
    demo_dir = package.path / 'demo'
    index_file = demo_dir / DEMO_INDEX
    if not index_file.is_file():
        logger.debug(f'No demo index found at "{index_file}"')
        return None
    logger.info('Rendering demos')
    dest = package.base_path / DEMO_PAGES
    dest.mkdir(exist_ok=True)
    demos: List[SiteLink] = []
    for name, title in read_demo_index(index_file):
        source = demo_dir / f'{name}.py'
        if not source.is_file():
            logger.warning(f'Demo "{name}" is listed in {DEMO_INDEX} but {source.name} '
                           'does not exist')
            continue
        filename = f'{name}.html'
        try:
            code = source.read_text(encoding='utf-8')
            with ExampleContext(name, figure_dir=dest,
                                stop_on_error=stop_on_error) as context:
                outputs = context.evaluate(code)
            write_page(dest / filename, renderer.render_demo(name, title, outputs, package))
        except ExampleError:
            raise
        except (StaticDocsError, OSError, UnicodeDecodeError) as e:
            logger.error(f'Could not build demo "{name}": {type(e).__name__}: {e}')
            continue
        demos.append(SiteLink(f'{DEMO_PAGES}/{filename}', title))
    return demos


def readme(package: PackageInfo) -> Optional[str]:
    path = package.path / 'README.md'
    if not path.is_file():
        return None
    return str(to_html(path.read_text(encoding='utf-8')))

