from typing import Any

from fastapi import APIRouter, Body, Depends, status

from zerogrid.api.envelope import Envelope
from zerogrid.api.error import raise_for_error
from zerogrid.app.services.dtos import UserInfo
from zerogrid.app.services.notifier import INotifier
from zerogrid.app.services.unit_of_work import UnitOfWork
from zerogrid.app.services.user_service import UserService
from zerogrid.app.validators import ProfileValidator
from zerogrid.depends import UserRateLimit, get_current_user, get_notifier, get_unit_of_work

router = APIRouter(prefix="/users", tags=["User"])


@router.get(
    "/profile",
    status_code=status.HTTP_200_OK,
    response_model=Envelope[UserInfo],
    dependencies=[Depends(UserRateLimit("profile"))],
)
async def get_profile(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    result = await UserService(uow, notifier).get_profile(current_user["user_id"])
    if result.is_err():
        raise_for_error(result.error)

    return {"success": True, "data": result.value}


@router.put(
    "/profile",
    status_code=status.HTTP_200_OK,
    response_model=Envelope[UserInfo],
    dependencies=[Depends(UserRateLimit("update-profile"))],
)
async def update_profile(
    payload: Any = Body(default=None),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Update name and/or email

    Raises:
        - 400 Bad Request: Invalid input, or the email belongs to another user
        - 404 Not Found: The account no longer exists
    """
    command = ProfileValidator().validate(payload)
    if command.is_err():
        raise_for_error(command.error)

    result = await UserService(uow, notifier).update_profile(current_user["user_id"], command.value)
    if result.is_err():
        raise_for_error(result.error)

    return {"success": True, "data": result.value}
