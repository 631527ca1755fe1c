"""Shared fixtures for the translation-extract test suite."""

from pathlib import Path

import pytest


# ── Path fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def repo_root() -> Path:
    """Root of the translation-extract repo."""
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def package_root(repo_root: Path) -> Path:
    """Root of the translation_extract Python package."""
    return repo_root / "translation_extract"


@pytest.fixture
def template_filename() -> str:
    return "test.template.html"


@pytest.fixture
def component_filename() -> str:
    return "test.component.ts"


# ── Parser fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def directive_parser():
    """DirectiveParser with the default ``translate`` marker."""
    from translation_extract.extraction.directive import DirectiveParser

    return DirectiveParser()


@pytest.fixture
def pipe_parser():
    """PipeParser with the default ``translate`` pipe."""
    from translation_extract.extraction.pipe import PipeParser

    return PipeParser()


# ── Sample project fixtures ─────────────────────────────────────────────────

SAMPLE_HOME_TEMPLATE = """\
<header>
  <h1 translate>Welcome home</h1>
  <p>{{ 'HOME.SUBTITLE' | translate }}</p>
</header>
@if (user) {
  <span [translate]="user.admin ? 'HOME.ADMIN' : 'HOME.MEMBER'"></span>
} @else {
  <a translate="HOME.SIGN_IN" href="/login"></a>
}
"""

SAMPLE_COMPONENT = """\
import { Component } from '@angular/core';

@Component({
  selector: 'app-footer',
  template: '<footer>{{ \\'FOOTER.COPYRIGHT\\' | translate }}</footer>'
})
export class FooterComponent {}
"""


@pytest.fixture
def sample_src_dir(tmp_path: Path) -> Path:
    """Temporary source tree with one template and one inline-template component."""
    src = tmp_path / "src"
    (src / "app" / "home").mkdir(parents=True)
    (src / "app" / "footer").mkdir(parents=True)
    (src / "app" / "home" / "home.component.html").write_text(SAMPLE_HOME_TEMPLATE)
    (src / "app" / "footer" / "footer.component.ts").write_text(SAMPLE_COMPONENT)
    (src / "app" / "notes.txt").write_text("{{ 'IGNORED' | translate }}")
    return src


@pytest.fixture
def sample_keys() -> list[str]:
    """Keys the sample project yields, in extraction order."""
    return [
        "FOOTER.COPYRIGHT",
        "Welcome home",
        "HOME.ADMIN",
        "HOME.MEMBER",
        "HOME.SIGN_IN",
        "HOME.SUBTITLE",
    ]


@pytest.fixture
def tmp_i18n_dir(tmp_path: Path) -> Path:
    """Temporary directory for catalog output."""
    d = tmp_path / "i18n"
    d.mkdir()
    return d
