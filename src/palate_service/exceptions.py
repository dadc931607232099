"""Service exceptions."""


class PalateServiceError(Exception):
    """Base class for service errors."""


class UserNotFoundError(PalateServiceError):
    """The User node for an e-mail does not exist in the graph."""

    def __init__(self, email: str):
        super().__init__(f"User not found in knowledge graph: {email}")
        self.email = email


class OnboardingIncompleteError(PalateServiceError):
    """The user has no onboarding record yet."""

    def __init__(self, email: str):
        super().__init__(f"User preferences not found, onboarding incomplete: {email}")
        self.email = email


class SearchProviderError(PalateServiceError):
    """The external restaurant search provider failed for one query."""


class InvalidQueryError(PalateServiceError):
    """A chat query was empty or too long."""
