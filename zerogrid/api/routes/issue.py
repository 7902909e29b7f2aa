from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from zerogrid.api.envelope import Envelope, MessageResponse
from zerogrid.api.error import raise_for_error
from zerogrid.app.services.dtos import IssueInfo
from zerogrid.app.services.issue_service import IssueService
from zerogrid.app.services.notifier import INotifier
from zerogrid.app.services.unit_of_work import UnitOfWork
from zerogrid.app.validators import IssueUpdateValidator, IssueValidator
from zerogrid.depends import UserRateLimit, get_current_user, get_notifier, get_unit_of_work

router = APIRouter(prefix="/issues", tags=["Issues"])


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=Envelope[List[IssueInfo]],
    dependencies=[Depends(UserRateLimit("issues"))],
)
async def list_issues(
    issue_type: Optional[str] = Query(default=None, alias="type"),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """List the caller's issues, newest first, optionally filtered by ?type="""
    result = await IssueService(uow, notifier).get_issues(current_user["user_id"], issue_type)
    if result.is_err():
        raise_for_error(result.error)

    return {"success": True, "data": result.value}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Envelope[IssueInfo],
    dependencies=[Depends(UserRateLimit("create-issue"))],
)
async def create_issue(
    payload: Any = Body(default=None),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Create an issue owned by the caller

    Raises:
        - 400 Bad Request: Missing fields, short title/description or an
          unknown type/priority/status
    """
    command = IssueValidator().validate(payload)
    if command.is_err():
        raise_for_error(command.error)

    result = await IssueService(uow, notifier).create_issue(current_user["user_id"], command.value)
    if result.is_err():
        raise_for_error(result.error)

    return {"success": True, "data": result.value}


@router.get(
    "/{issue_id}",
    status_code=status.HTTP_200_OK,
    response_model=Envelope[IssueInfo],
    dependencies=[Depends(UserRateLimit("issue"))],
)
async def get_issue(
    issue_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Fetch one issue

    Raises:
        - 403 Forbidden: The issue belongs to another user
        - 404 Not Found: No such issue
    """
    result = await IssueService(uow, notifier).get_issue_by_id(current_user["user_id"], issue_id)
    if result.is_err():
        raise_for_error(result.error)

    return {"success": True, "data": result.value}


@router.put(
    "/{issue_id}",
    status_code=status.HTTP_200_OK,
    response_model=Envelope[IssueInfo],
    dependencies=[Depends(UserRateLimit("update-issue"))],
)
async def update_issue(
    issue_id: str,
    payload: Any = Body(default=None),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Partially update an issue

    Only type, title, description, priority and status can change.

    Raises:
        - 400 Bad Request: Invalid field values
        - 403 Forbidden: The issue belongs to another user
        - 404 Not Found: No such issue
    """
    command = IssueUpdateValidator().validate(payload)
    if command.is_err():
        raise_for_error(command.error)

    result = await IssueService(uow, notifier).update_issue(
        current_user["user_id"], issue_id, command.value
    )
    if result.is_err():
        raise_for_error(result.error)

    return {"success": True, "data": result.value}


@router.delete(
    "/{issue_id}",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(UserRateLimit("delete-issue"))],
)
async def delete_issue(
    issue_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Delete an issue

    Raises:
        - 403 Forbidden: The issue belongs to another user
        - 404 Not Found: No such issue
    """
    result = await IssueService(uow, notifier).delete_issue(current_user["user_id"], issue_id)
    if result.is_err():
        raise_for_error(result.error)

    return {"success": True, "message": "Issue deleted successfully"}
