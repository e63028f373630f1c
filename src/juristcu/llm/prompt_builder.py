"""
Prompt builder for criterion evaluation requests.

Responsible for:
- Loading and rendering Jinja2 templates (system + criterion prompts)
- Cutting the ruling body to the configured prefix
- Exposing the system prompt the provider clients send alongside
"""

from pathlib import Path
from typing import Optional

import structlog
from jinja2 import Environment, FileSystemLoader

from juristcu.llm.text_utils import body_prefix
from juristcu.models.domain import Document


logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "prompts"


class PromptBuilder:
    """
    Build criterion prompts from a case description and a document.

    The rendered prompt depends only on its inputs, so a scan that repeats
    the same (case, document, criterion) triple always sends the same text.
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        body_prefix_limit: int = 2000,
        justification_max_length: int = 200,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing prompt templates (defaults to
                the templates shipped with the package)
            body_prefix_limit: Max characters of texto_pdf included
            justification_max_length: Length limit announced to the model
        """
        self.templates_dir = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
        self.body_prefix_limit = body_prefix_limit
        self.justification_max_length = justification_max_length

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            autoescape=False  # We're generating prompts, not HTML
        )

        try:
            self.system_template = self.jinja_env.get_template("system_prompt.txt")
            self.criterion_template = self.jinja_env.get_template("criterion_prompt.txt")
            logger.info("Loaded prompt templates", templates_dir=str(self.templates_dir))
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e))
            raise

    def build_system_prompt(self) -> str:
        """Render the static system prompt."""
        return self.system_template.render().strip()

    def build_criterion_prompt(self, case_text: str, document: Document, criterion: str) -> str:
        """
        Render the prompt asking whether `document` meets `criterion` for `case_text`.

        Args:
            case_text: The user's case description (caso concreto)
            document: Ruling under evaluation
            criterion: Criterion text from the taxonomy

        Returns:
            Rendered prompt as string
        """
        rendered = self.criterion_template.render(
            case_text=case_text,
            label=document.label,
            titulo=document.titulo or "",
            sumario=document.sumario or "",
            body_prefix=body_prefix(document.texto_pdf, self.body_prefix_limit),
            criterion=criterion,
            justification_max_length=self.justification_max_length,
        ).strip()

        logger.debug(
            "Criterion prompt built",
            document=document.label,
            prompt_length=len(rendered),
        )
        return rendered
