"""Prompt rendering for the generation and review passes."""

from codepack.rendering.template_set import TemplateRenderer
from codepack.schemas.specification import ProjectSpecification


def prompt_template_id(target: str, is_review_pass: bool) -> str:
    template_type = "review" if is_review_pass else "generation"
    return f"{target}/prompt_templates/{template_type}.j2"


def render_prompt(
    templates: TemplateRenderer,
    spec: ProjectSpecification,
    target: str,
    is_review_pass: bool = False,
    initial_code: str = "",
) -> str:
    """Render the prompt sent to the text model.

    Extras are available at top level, mirroring the infrastructure templates.
    The review prompt additionally receives the code under review.

    Raises:
        TemplateNotFoundError: If the target ships no prompt template for the pass
    """
    context = spec.template_context()
    if is_review_pass:
        context["initial_code"] = initial_code
    return templates.render(prompt_template_id(target, is_review_pass), context)
