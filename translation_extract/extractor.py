"""Extraction run: discover sources, extract keys, merge and write catalogs."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from translation_extract.collection import TranslationCollection
from translation_extract.compilers.base import CompilerInterface
from translation_extract.compilers.factory import create_compiler
from translation_extract.config import ExtractorConfig, ParserName
from translation_extract.extraction.base import ParserInterface
from translation_extract.extraction.directive import DirectiveParser
from translation_extract.extraction.pipe import PipeParser
from translation_extract.post_processors.base import PostProcessorInterface
from translation_extract.post_processors.purge_obsolete import PurgeObsoletePostProcessor
from translation_extract.post_processors.sort_by_key import SortByKeyPostProcessor
from translation_extract.post_processors.string_as_default_value import (
    StringAsDefaultValuePostProcessor,
)
from translation_extract.template.errors import TemplateParseError

logger = logging.getLogger(__name__)


class ExtractionReport(BaseModel):
    """Outcome of writing one output catalog."""

    model_config = ConfigDict(frozen=True)

    path: str
    extracted: int
    existing: int
    added: int
    removed: int
    total: int


def discover_files(inputs: list[str], patterns: list[str]) -> list[Path]:
    """Source files under each input, sorted and de-duplicated.

    An input that is a file is taken as is; a directory is searched with
    every glob pattern.

    Raises:
        FileNotFoundError: if an input does not exist.
    """
    found: set[Path] = set()
    for raw in inputs:
        root = Path(raw)
        if root.is_file():
            found.add(root)
            continue
        if not root.is_dir():
            raise FileNotFoundError(f"Input path does not exist: {raw}")
        for pattern in patterns:
            found.update(p for p in root.glob(pattern) if p.is_file())
    return sorted(found)


class ExtractTask:
    """One configured extraction run."""

    def __init__(self, config: ExtractorConfig) -> None:
        self.config = config
        self.parsers = self._build_parsers()
        self.post_processors = self._build_post_processors()
        self.compiler = self._build_compiler()

    def _build_parsers(self) -> list[ParserInterface]:
        parsers: list[ParserInterface] = []
        for name in self.config.parsers:
            if name == ParserName.directive:
                parsers.append(DirectiveParser(self.config.marker_attributes))
            elif name == ParserName.pipe:
                parsers.append(PipeParser(self.config.pipe_names))
        return parsers

    def _build_post_processors(self) -> list[PostProcessorInterface]:
        processors: list[PostProcessorInterface] = []
        if self.config.clean:
            processors.append(PurgeObsoletePostProcessor())
        if self.config.string_as_default_value is not None:
            processors.append(StringAsDefaultValuePostProcessor(self.config.string_as_default_value))
        if self.config.sort:
            processors.append(SortByKeyPostProcessor())
        return processors

    def _build_compiler(self) -> CompilerInterface:
        return create_compiler(
            self.config.format,
            indentation=self.config.indentation,
            newline_at_end_of_file=self.config.newline_at_end_of_file,
        )

    def extract(self) -> TranslationCollection:
        """Keys from every source file, in file order.

        Raises:
            TemplateParseError: if a template cannot be parsed.
        """
        files = discover_files(self.config.input, self.config.patterns)
        logger.info("Found %d source file(s)", len(files))

        collection = TranslationCollection()
        for path in files:
            source = path.read_text(encoding="utf-8")
            for parser in self.parsers:
                try:
                    found = parser.extract(source, str(path))
                except TemplateParseError as e:
                    if e.file_path:
                        raise
                    raise e.with_file(str(path)) from e
                logger.debug("%s: %d key(s) from %s", path, found.count(), type(parser).__name__)
                collection = collection.union(found)
        return collection

    def load_existing(self, path: Path) -> TranslationCollection:
        """Existing catalog at ``path``, or an empty one if there is none."""
        if self.config.replace or not path.is_file():
            return TranslationCollection()
        return self.compiler.parse(path.read_text(encoding="utf-8"))

    def process(
        self,
        extracted: TranslationCollection,
        existing: TranslationCollection,
    ) -> TranslationCollection:
        """Merge with ``existing`` and apply post-processors in order."""
        draft = extracted.union(existing, overwrite=True)
        for processor in self.post_processors:
            draft = processor.process(draft, extracted, existing)
        return draft

    def write(self, path: Path, extracted: TranslationCollection) -> ExtractionReport:
        existing = self.load_existing(path)
        final = self.process(extracted, existing)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.compiler.compile(final), encoding="utf-8")

        report = ExtractionReport(
            path=str(path),
            extracted=extracted.count(),
            existing=existing.count(),
            added=sum(1 for key in final.keys() if not existing.has(key)),
            removed=sum(1 for key in existing.keys() if not final.has(key)),
            total=final.count(),
        )
        logger.info(
            "%s: %d key(s) (%d added, %d removed)",
            report.path,
            report.total,
            report.added,
            report.removed,
        )
        return report

    def execute(self) -> list[ExtractionReport]:
        """Run extraction and write every output catalog."""
        extracted = self.extract()
        return [self.write(Path(output), extracted) for output in self.config.output]
