"""
Pipeline generator: orchestrates the generation phases.

1. Phase 1 (Parser): load the core and write documents and merge them
2. Phase 2 (Analyzer): flatten analysis, classification and IR building
3. Phase 3 (Backend): render the IR to Python source
"""

from __future__ import annotations

import logging
from pathlib import Path

from .analyzer import IR, SchemaAnalyzer
from .backends import PythonBackend
from .config import CodeGeneratorConfig, GenerationProfile
from .schema_ast import Specification, load_specification, merge_specifications

logger = logging.getLogger(__name__)

DEFAULT_SPECS_DIR = Path(__file__).parent.parent / "specs"


class PipelineGenerator:
    """
    Generates the typed module of one specification version.

    Args:
        profile: Generation profile of the version
        config: Run options, applied on top of the profile
        specs_dir: Directory holding one sub-directory of documents per version
    """

    def __init__(
        self,
        profile: GenerationProfile,
        config: CodeGeneratorConfig | None = None,
        specs_dir: Path | str | None = None,
    ):
        self.config = config or CodeGeneratorConfig()
        self.profile = profile.with_config(self.config)
        self.specs_dir = Path(specs_dir) if specs_dir is not None else DEFAULT_SPECS_DIR

    def load_specification(self) -> Specification:
        """Load the document pair of the profile and merge the write document into the core one."""
        core_path = self.specs_dir / self.profile.raw_specs.main
        write_path = self.specs_dir / self.profile.raw_specs.write

        logger.debug("Loading specification documents %s and %s", core_path, write_path)
        return merge_specifications(load_specification(core_path), load_specification(write_path))

    def analyze(self, spec: Specification) -> IR:
        return SchemaAnalyzer(self.profile).analyze(spec)

    def generate(self, spec: Specification | None = None) -> str:
        """
        Run the whole pipeline.

        Args:
            spec: Already merged specification, loaded from the specs directory when omitted

        Returns:
            The generated Python module
        """
        if spec is None:
            spec = self.load_specification()

        ir = self.analyze(spec)

        backend = PythonBackend(self.config)
        code = backend.generate(ir)
        logger.debug("Generated %d lines for spec version %s", code.count("\n"), self.profile.version.value)
        return code
