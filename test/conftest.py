import logging
from pathlib import Path
from textwrap import dedent

import pytest

from staticdocs.core.render import Renderer
from staticdocs.package import PackageInfo, package_info

PYPROJECT = '''\
[project]
name = "mypkg"
version = "1.2.3"
description = "A package to test with"
authors = [{name = "Ada Lovelace", email = "ada@example.com"}]

[project.urls]
Homepage = "https://example.com/mypkg"
'''

MEAN_TOPIC = '''\
---
aliases: [mean, average]
title: Arithmetic mean
keywords: [math]
---
Computes the arithmetic mean of numbers.

## Usage
`mean(xs)`

## See also
[[zeta]] and [[missing_topic]]

## Examples
```python
from mypkg import mean
mean([1, 2, 3])
```
'''

HELPERS_TOPIC = '''\
---
aliases: [helpers, util]
title: Internal helpers
keywords: [internal]
---
Helpers that are not part of the public interface.

## Examples
```python
x = 41
print(x + 1)
```
'''

ZETA_TOPIC = '''\
# Zeta function

## Examples
```python
print(x)
```
'''


@pytest.fixture(autouse=True)
def enable_logging():
    """
    The CLI disables logging when it is not verbose, re-enable it for every test.
    """
    yield
    logging.disable(logging.NOTSET)


@pytest.fixture
def package_dir(tmp_path: Path) -> Path:
    """
    Provides a package with three topics, a README, a vignette and a demo.
    """
    root = tmp_path / 'mypkg'
    (root / 'src' / 'mypkg').mkdir(parents=True)
    (root / 'pyproject.toml').write_text(PYPROJECT)
    (root / 'src' / 'mypkg' / '__init__.py').write_text(
        'def mean(xs):\n    return sum(xs) / len(xs)\n'
    )
    (root / 'README.md').write_text('# mypkg\n\nThe **mypkg** readme.\n')
    man = root / 'man'
    man.mkdir()
    (man / 'mean.md').write_text(MEAN_TOPIC)
    (man / 'helpers.md').write_text(HELPERS_TOPIC)
    (man / 'zeta.md').write_text(ZETA_TOPIC)
    vignettes = root / 'vignettes'
    vignettes.mkdir()
    (vignettes / 'intro.md').write_text(dedent('''\
        <!-- %\\VignetteIndexEntry{Getting started} -->
        # Introduction

        How to use mypkg.
    '''))
    demo = root / 'demo'
    demo.mkdir()
    (demo / '00Index').write_text('basics    Basic usage\n')
    (demo / 'basics.py').write_text("print('hello demo')\n1 + 1\n")
    return root


@pytest.fixture
def empty_package_dir(tmp_path: Path) -> Path:
    """
    Provides a package without any documentation.
    """
    root = tmp_path / 'emptypkg'
    root.mkdir()
    (root / 'pyproject.toml').write_text('[project]\nname = "emptypkg"\nversion = "0.1"\n')
    return root


@pytest.fixture
def package(package_dir: Path) -> PackageInfo:
    info = package_info(package_dir)
    info.base_path.mkdir(parents=True, exist_ok=True)
    return info


@pytest.fixture
def renderer() -> Renderer:
    return Renderer()
