"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Header, Request

from specpilot.errors.exceptions import ValidationError
from specpilot.integrations.service import IntegrationService
from specpilot.services.generator import SpecGenerator
from specpilot.services.review_state import SpecReviewService


def get_spec_service(request: Request) -> SpecReviewService:
    """Return the review service bound to the app's store."""
    return request.app.state.spec_service


def get_integration_service(request: Request) -> IntegrationService:
    return request.app.state.integration_service


def get_generator(request: Request) -> SpecGenerator:
    return request.app.state.generator


def get_optional_client_id(x_client_id: Annotated[str | None, Header()] = None) -> str | None:
    return x_client_id or None


def get_client_id(client_id: str | None = Depends(get_optional_client_id)) -> str:
    """Require the X-Client-Id header."""
    if not client_id:
        raise ValidationError("Missing X-Client-Id", code="MISSING_CLIENT_ID")
    return client_id


# Type aliases for dependency injection
SpecService = Annotated[SpecReviewService, Depends(get_spec_service)]
Integrations = Annotated[IntegrationService, Depends(get_integration_service)]
Generator = Annotated[SpecGenerator, Depends(get_generator)]
ClientId = Annotated[str, Depends(get_client_id)]
OptionalClientId = Annotated[str | None, Depends(get_optional_client_id)]
