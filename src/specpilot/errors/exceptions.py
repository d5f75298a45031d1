"""Custom exception classes for the SpecPilot API."""


class SpecPilotError(Exception):
    """Base exception for SpecPilot."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(SpecPilotError):
    """Request is missing required input or is malformed."""

    def __init__(self, message: str, details=None, code: str = "VALIDATION_ERROR"):
        super().__init__(code, message, details, status_code=400)


class MissingInputError(ValidationError):
    """A required request field is absent."""

    def __init__(self, field: str):
        super().__init__(
            f'Missing "{field}" in request body',
            details={"field": field},
            code="MISSING_INPUT",
        )


class NotFoundError(SpecPilotError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            status_code=404,
        )


class PermissionDeniedError(SpecPilotError):
    """Caller role may not perform the requested transition."""

    def __init__(self, message: str = "Only Approvers can validate or approve specs"):
        super().__init__("PERMISSION_DENIED", message, status_code=403)


class IntegrationNotConfiguredError(SpecPilotError):
    """The client has not configured the requested integration."""

    def __init__(self, integration: str):
        super().__init__(
            "INTEGRATION_NOT_CONFIGURED",
            f"{integration} is not configured for this workspace",
            details={"integration": integration},
            status_code=400,
        )


class IntegrationError(SpecPilotError):
    """An outbound integration call failed."""

    def __init__(self, message: str, details=None):
        super().__init__("INTEGRATION_ERROR", message, details, status_code=502)


class GenerationError(SpecPilotError):
    """The AI generator failed or returned an unusable response."""

    def __init__(self, message: str, details=None):
        super().__init__("GENERATION_ERROR", message, details, status_code=502)
