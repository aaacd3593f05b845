'''
Rendering of topic, demo, vignette and index pages through Jinja2 templates.
'''

import logging
import re
from typing import Any, Callable, Dict, Final, List, Mapping, Optional, Sequence

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, TemplateError, \
    select_autoescape
import markdown
from markupsafe import Markup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import PythonLexer

from staticdocs.core.evaluate import ExampleContext, ExampleOutput
from staticdocs.core.topic import IndexEntry, RenderedTopic, TopicDocument
from staticdocs.core.utils import PathLike
from staticdocs.exceptions import RenderError
from staticdocs.package import PackageInfo

logger = logging.getLogger('staticdocs')

Resolver = Callable[[str], Optional[str]]

MARKDOWN_EXTENSIONS: Final[List[str]] = ['fenced_code', 'codehilite', 'tables', 'def_list',
                                         'attr_list', 'toc']
MARKDOWN_EXTENSION_CONFIGS: Final[Dict[str, Dict[str, Any]]] = {
    'codehilite': {'css_class': 'highlight', 'noclasses': True}
}
TOPIC_LINK: Final[re.Pattern[str]] = re.compile(r'\[\[([^\[\]\n]+?)\]\]')
"""
Cross reference to another topic, e.g. `[[mean]]`.
"""


def to_html(text: str) -> Markup:
    return Markup(markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS,
                                    extension_configs=MARKDOWN_EXTENSION_CONFIGS))


def link_topics(text: str, resolve: Resolver) -> str:
    '''
    Replaces topic cross references with Markdown links to the referenced pages.

    Parameters:
        text: Markdown text.
        resolve: Maps an alias to its output file, or `None` if the alias is unknown.

    Returns:
        The text with every `[[alias]]` replaced by a link, or by inline code if the alias
        does not exist.
    '''

    def replace(match: re.Match[str]) -> str:
        alias = match.group(1).strip()
        output_file = resolve(alias)
        if output_file is None:
            logger.warning(f'Could not resolve link to topic "{alias}"')
            return f'`{alias}`'
        return f'[`{alias}`]({output_file})'

    return TOPIC_LINK.sub(replace, text)


def highlight_code(code: str) -> Markup:
    return Markup(highlight(code, PythonLexer(), HtmlFormatter(noclasses=True)))


class Renderer:
    '''
    Renders pages from the packaged templates, optionally overridden by a templates directory.

    Parameters:
        templates_path: Directory whose templates take precedence over the packaged ones.
        examples: Evaluate topic examples. If `False`, example code is only highlighted.
    '''

    def __init__(self, templates_path: Optional[PathLike] = None, examples: bool = True) -> None:
        loaders = []
        if templates_path is not None:
            loaders.append(FileSystemLoader(str(templates_path)))
        loaders.append(PackageLoader('staticdocs', 'templates'))
        self.env = Environment(loader=ChoiceLoader(loaders),
                               autoescape=select_autoescape(['html']),
                               trim_blocks=True, lstrip_blocks=True)
        self.examples = examples

    def render_template(self, name: str, data: Mapping[str, Any]) -> str:
        try:
            return self.env.get_template(f'{name}.html').render(**data)
        except TemplateError as e:
            raise RenderError(f'Could not render template "{name}": {e}') from e

    def render_outputs(self, outputs: Sequence[ExampleOutput]) -> List[Dict[str, Any]]:
        return [{'source': highlight_code(o.source), 'stdout': o.stdout, 'value': o.value,
                 'error': o.error, 'figures': o.figures} for o in outputs]

    def render_examples(self, code: str, context: ExampleContext) -> List[Dict[str, Any]]:
        if not self.examples:
            return [{'source': highlight_code(code), 'stdout': '', 'value': None,
                     'error': None, 'figures': []}]
        return self.render_outputs(context.evaluate(code))

    def render_topic(self, payload: TopicDocument, context: ExampleContext, topic_name: str,
                     package: PackageInfo, resolve: Optional[Resolver] = None) -> RenderedTopic:
        '''
        Renders the page of a topic.

        Parameters:
            payload: The parsed topic.
            context: Execution context the topic's examples are evaluated in.
            topic_name: Name of the page, without extension.
            package: Package metadata shown on the page.
            resolve: Resolves cross references to other topics.

        Returns:
            The topic's title, keywords and page.
        '''
        title = payload.title or topic_name
        sections = []
        for heading, text in payload.sections:
            if resolve is not None:
                text = link_topics(text, resolve)
            try:
                sections.append({'heading': heading, 'html': to_html(text)})
            except Exception as e:
                raise RenderError(f'Could not convert section "{heading}" of '
                                  f'"{topic_name}": {e}') from e
        examples = self.render_examples(payload.examples, context) if payload.examples else []
        html = self.render_template('topic', {
            'package': package, 'root': '', 'name': topic_name, 'title': title,
            'keywords': sorted(payload.keywords), 'sections': sections, 'examples': examples
        })
        return RenderedTopic(title, frozenset(payload.keywords), html)

    def render_index(self, entries: Sequence[IndexEntry], package: PackageInfo) -> str:
        return self.render_template('index', {
            'package': package, 'root': '', 'title': package.name,
            'topic_index': [e.to_json() for e in entries],
            'vignettes': [v.to_json() for v in package.vignettes or []],
            'demos': [d.to_json() for d in package.demos or []],
            'readme': Markup(package.readme) if package.readme else None
        })

    def render_demo(self, name: str, title: str, outputs: Sequence[ExampleOutput],
                    package: PackageInfo) -> str:
        return self.render_template('demo', {
            'package': package, 'root': '../', 'name': name, 'title': title,
            'outputs': self.render_outputs(outputs)
        })

    def render_vignette(self, title: str, content: str, package: PackageInfo) -> str:
        return self.render_template('vignette', {
            'package': package, 'root': '../', 'title': title, 'content': Markup(content)
        })
