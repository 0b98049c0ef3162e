"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from cash_or_card.core.security import decode_access_token
from cash_or_card.db.session import get_db
from cash_or_card.models import User
from cash_or_card.services.consensus import ConsensusEngine
from cash_or_card.services.moderation import ModerationGateway
from cash_or_card.services.ratings import RatingService
from cash_or_card.services.scoring import ConfidenceScorer, get_scorer

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _decode_user_id(subject: str) -> int:
    """Parse the numeric user ID carried in a token subject.

    Raises:
        HTTPException: If the subject is not an integer
    """
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    subject = payload.get("sub")
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    user = db.get(User, _decode_user_id(subject))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_registered(current_user: CurrentUserDep) -> User:
    """Reject guest accounts."""
    if not current_user.is_registered:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Registered account required for this action",
        )
    return current_user


def require_admin(current_user: CurrentUserDep) -> User:
    """Reject anyone but administrators."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this resource",
        )
    return current_user


RegisteredUserDep = Annotated[User, Depends(require_registered)]
AdminUserDep = Annotated[User, Depends(require_admin)]


def get_scorer_dep() -> ConfidenceScorer:
    """Return the configured confidence scorer."""
    return get_scorer()


def get_consensus_engine(
    db: SessionDep,
    scorer: Annotated[ConfidenceScorer, Depends(get_scorer_dep)],
) -> ConsensusEngine:
    """Build a consensus engine bound to the request session."""
    return ConsensusEngine(db, scorer)


def get_moderation_gateway(db: SessionDep) -> ModerationGateway:
    """Build a moderation gateway bound to the request session."""
    return ModerationGateway(db)


def get_rating_service(db: SessionDep) -> RatingService:
    """Build a rating service bound to the request session."""
    return RatingService(db)


ConsensusDep = Annotated[ConsensusEngine, Depends(get_consensus_engine)]
ModerationDep = Annotated[ModerationGateway, Depends(get_moderation_gateway)]
RatingsDep = Annotated[RatingService, Depends(get_rating_service)]
