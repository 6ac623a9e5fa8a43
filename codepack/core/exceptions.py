class CodepackError(Exception):
    """Base exception for Codepack."""

    pass


class SpecificationError(CodepackError):
    """Raised when the project specification cannot be parsed or validated."""

    pass


class TemplateNotFoundError(CodepackError):
    """Raised when a template id is not part of the loaded template set."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")


class PackagingError(CodepackError):
    """Raised when a packaging run cannot produce a usable artifact."""

    pass


class LLMProviderError(CodepackError):
    """Raised when the text-generation provider call fails."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")
