"""User endpoints."""

from fastapi import APIRouter, Depends

from investledger.api.deps import get_ledger_service, get_current_user_id
from investledger.api.schemas import UserCreate, UserResponse
from investledger.services import LedgerService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    data: UserCreate,
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> UserResponse:
    """Create a user; its id is then sent as X-User-Id."""
    user = ledger_service.create_user(data.email)
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
def get_me(
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> UserResponse:
    """Return the requesting user."""
    return UserResponse.model_validate(ledger_service.get_user(user_id))
