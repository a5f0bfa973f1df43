"""
Authentication utilities for extracting user information from API Gateway events.
"""
from typing import Dict, Any, Optional
from aws_lambda_powertools import Logger

from ..models.subscription import AuthSession, SessionUser

logger = Logger()


def get_all_user_claims(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract all user claims from API Gateway event context.

    When API Gateway uses Cognito authorization, it validates the JWT token
    and provides the user claims in requestContext.authorizer.claims.

    Args:
        event: API Gateway event dictionary

    Returns:
        Dictionary of all JWT claims, empty when the request is anonymous
    """
    request_context = event.get("requestContext") or {}
    authorizer = request_context.get("authorizer") or {}
    claims = authorizer.get("claims") or {}
    if not isinstance(claims, dict):
        logger.warning("Ignoring malformed authorizer claims")
        return {}
    return claims


def extract_user_id_from_event(event: Dict[str, Any]) -> Optional[str]:
    """
    Extract user_id (the 'sub' claim) from the API Gateway event.

    Args:
        event: API Gateway event dictionary

    Returns:
        User ID from the JWT token, or None if not found
    """
    user_id = get_all_user_claims(event).get("sub")
    if user_id:
        logger.debug(f"Successfully extracted user_id: {user_id}")
        return user_id
    logger.debug("No user_id found in JWT claims")
    return None


def extract_session_from_event(event: Dict[str, Any]) -> AuthSession:
    """
    Build the authentication fact for the current request.

    Args:
        event: API Gateway event dictionary

    Returns:
        AuthSession: authenticated with user details when a 'sub' claim is
        present, anonymous otherwise
    """
    claims = get_all_user_claims(event)
    user_id = claims.get("sub")
    if not user_id:
        return AuthSession(is_authenticated=False)

    return AuthSession(
        is_authenticated=True,
        user=SessionUser(
            user_id=user_id,
            email=claims.get("email"),
            first_name=claims.get("given_name"),
            last_name=claims.get("family_name"),
        ),
    )
