"""
Custom business exceptions for the negotiation service.

WHAT: Domain-specific exceptions that map to HTTP status codes
WHY: Consistent error handling across the engine and API endpoints
HOW: Custom exception classes with error codes and messages
"""

from typing import Optional, List, Dict, Any


class BusinessException(Exception):
    """Base class for business logic exceptions."""

    def __init__(self, message: str, code: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class UnknownSellerException(BusinessException):
    """Raised when a negotiation references a seller that is not in the roster."""

    def __init__(self, seller_id: str):
        super().__init__(
            message=f"Store not found: {seller_id}",
            code="UNKNOWN_SELLER",
            details={"seller_id": seller_id}
        )


class EmptyOfferSetException(BusinessException):
    """Raised when ranking is attempted without any offers."""

    def __init__(self, priority: str | None = None):
        super().__init__(
            message="No offers to evaluate",
            code="INVALID_STATE",
            details={"priority": priority} if priority else None
        )


class UnknownProviderVariantException(BusinessException):
    """Raised when a provider variant id is not in the variant table."""

    def __init__(self, variant_id: str, known: List[str]):
        super().__init__(
            message=f"Unknown provider: {variant_id}",
            code="UNKNOWN_PROVIDER",
            details={"provider": variant_id, "available": known}
        )


class ConversationNotFoundException(BusinessException):
    """Raised when a saved conversation is not found."""

    def __init__(self, conversation_id: str):
        super().__init__(
            message=f"Conversation not found: {conversation_id}",
            code="CONVERSATION_NOT_FOUND",
            details={"conversation_id": conversation_id}
        )


class ValidationException(BusinessException):
    """Raised for validation errors."""

    def __init__(self, message: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field_errors": field_errors} if field_errors else None
        )
