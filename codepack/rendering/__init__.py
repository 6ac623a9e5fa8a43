"""Template rendering for infrastructure files, bootstrap skeletons and prompts."""

from codepack.rendering.template_set import TemplateRenderer, TemplateSet, load_template_set

__all__ = ["TemplateRenderer", "TemplateSet", "load_template_set"]
