"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement.
"""

from __future__ import annotations

import textwrap
from abc import ABC, abstractmethod
from pathlib import Path

import jinja2

from ..analyzer.ir_nodes import IR, TypeDef
from ..config import CodeGeneratorConfig


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Template names, without extension
    TEMPLATES: tuple[str, ...] = ()

    # Maximum width of documentation lines
    DOC_WIDTH = 100

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.templates = {
            name: self.jinja_env.get_template(f"{name}.{self.FILE_EXTENSION}.jinja2") for name in self.TEMPLATES
        }

    def render(self, template_name: str, **context) -> str:
        """Render a template, without its trailing newlines."""
        return self.templates[template_name].render(**context).rstrip("\n")

    @abstractmethod
    def generate(self, ir: IR) -> str:
        """
        Generate code from IR.

        Args:
            ir: The intermediate representation

        Returns:
            Generated code as a string
        """

    @abstractmethod
    def render_type(self, type_def: TypeDef) -> str:
        """Render the structural definition of a type."""

    @abstractmethod
    def render_codec(self, type_def: TypeDef) -> str:
        """Render the custom encode/decode logic of a type."""

    def type_doc(self, type_def: TypeDef) -> str | None:
        """Documentation of a type: title, then description."""
        parts = [part for part in (type_def.title, type_def.description) if part]
        if not parts:
            return None
        return "\n\n".join(parts)

    def wrap_doc(self, text: str, indent: int = 0) -> list[str]:
        """Word-wrap documentation text, keeping paragraph breaks."""
        width = max(self.DOC_WIDTH - indent, 20)
        lines: list[str] = []
        for index, paragraph in enumerate(text.split("\n\n")):
            if index > 0:
                lines.append("")
            lines.extend(textwrap.wrap(paragraph, width=width) or [""])
        return lines
