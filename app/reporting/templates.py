"""Template rendering for recommendation reports using Jinja2.

Wraps Jinja2 with strict undefined checking so a template referencing a
missing variable fails loudly instead of printing a blank.
"""

import logging
from typing import Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

logger = logging.getLogger(__name__)


class ReportTemplateError(Exception):
    """Raised when a report template cannot be loaded or rendered."""


class TemplateRenderer:
    """Renders plain-text reports from templates in app.reporting.templates.

    Templates are cached by the Jinja2 environment after first load.
    """

    def __init__(
        self,
        template_dir: str = "templates",
        digest_template: str = "recommendations.txt.j2",
        breakdown_template: str = "breakdown.txt.j2",
    ):
        """Initialize template renderer with Jinja2 environment.

        Args:
            template_dir: Directory name within the app.reporting package
            digest_template: Filename of the ranked digest template
            breakdown_template: Filename of the single-match breakdown template
        """
        self.digest_template_name = digest_template
        self.breakdown_template_name = breakdown_template

        # Plain text output, nothing to escape
        self.env = Environment(
            loader=PackageLoader("app.reporting", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    def render_digest(self, context: Dict) -> str:
        """Render the ranked recommendation digest.

        Raises:
            ReportTemplateError: If template rendering fails
        """
        return self._render(self.digest_template_name, context)

    def render_breakdown(self, context: Dict) -> str:
        """Render a single match breakdown.

        Raises:
            ReportTemplateError: If template rendering fails
        """
        return self._render(self.breakdown_template_name, context)

    def _render(self, template_name: str, context: Dict) -> str:
        try:
            template = self.env.get_template(template_name)
            return template.render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed for {template_name}: {e}"
            logger.error(error_msg, exc_info=True)
            raise ReportTemplateError(error_msg) from e
