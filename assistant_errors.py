"""Exception types raised by the portfolio assistant."""


class AssistantError(Exception):
    """Base class for assistant failures."""


class KnowledgeBaseNotReadyError(AssistantError):
    """A query arrived before any knowledge base was attached to the engine."""


class KnowledgeBaseLoadError(AssistantError):
    """The knowledge base or synonym table could not be read or has the wrong shape."""


class UnknownDocumentError(AssistantError):
    """A did-you-mean selection named no document of the attached knowledge base."""
