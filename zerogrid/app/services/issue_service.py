"""
Issue Service

Ownership-gated CRUD over issues. The caller's user id must equal the
issue's owner for every read, update and delete; there is no override.
"""

import logging
from typing import List, Optional

from zerogrid.app.services.dtos import CreateIssueCommand, IssueInfo, UpdateIssueCommand
from zerogrid.app.services.notifier import INotifier, issue_created_email
from zerogrid.app.services.unit_of_work import UnitOfWork
from zerogrid.domain.entities import Issue, IssuePriority, IssueStatus
from zerogrid.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class IssueService:
    def __init__(self, uow: UnitOfWork, notifier: INotifier):
        self.uow = uow
        self.notifier = notifier

    async def _get_owned(self, user_id: str, issue_id: str, action: str) -> Result[Issue]:
        issue = await self.uow.issues.get_by_id(issue_id)

        if issue is None:
            return Return.err(Error("NOT_FOUND", "Issue not found"))

        if issue.user_id != user_id:
            logger.warning(f"User {user_id} denied {action} on issue {issue_id}")
            return Return.err(
                Error("FORBIDDEN", f"Not authorized to {action} this issue")
            )

        return Return.ok(issue)

    async def create_issue(self, user_id: str, command: CreateIssueCommand) -> Result[IssueInfo]:
        async with self.uow:
            issue = Issue(
                type=command.type,
                title=command.title,
                description=command.description,
                priority=command.priority or IssuePriority.medium.value,
                status=command.status or IssueStatus.open.value,
                user_id=user_id,
            )
            issue = await self.uow.issues.create(issue)
            owner = await self.uow.users.get_by_id(user_id)
            await self.uow.commit()

            created = IssueInfo.model_validate(issue)
            message = None
            if owner is not None:
                message = issue_created_email(
                    owner.email,
                    owner.name or "User",
                    created.type,
                    created.title,
                    created.description,
                )

        if message is not None:
            self.notifier.submit(message)

        return Return.ok(created)

    async def get_issues(self, user_id: str, issue_type: Optional[str] = None) -> Result[List[IssueInfo]]:
        async with self.uow:
            issues = await self.uow.issues.get_by_user_id(user_id, issue_type)
            return Return.ok([IssueInfo.model_validate(issue) for issue in issues])

    async def get_issue_by_id(self, user_id: str, issue_id: str) -> Result[IssueInfo]:
        async with self.uow:
            owned = await self._get_owned(user_id, issue_id, "access")
            if owned.is_err():
                return Return.err(owned.error)
            return Return.ok(IssueInfo.model_validate(owned.value))

    async def update_issue(
        self, user_id: str, issue_id: str, command: UpdateIssueCommand
    ) -> Result[IssueInfo]:
        async with self.uow:
            owned = await self._get_owned(user_id, issue_id, "update")
            if owned.is_err():
                return Return.err(owned.error)

            issue = owned.value
            for field, value in command.model_dump(exclude_unset=True).items():
                setattr(issue, field, value)
            issue = await self.uow.issues.update(issue)
            await self.uow.commit()

            return Return.ok(IssueInfo.model_validate(issue))

    async def delete_issue(self, user_id: str, issue_id: str) -> Result[None]:
        async with self.uow:
            owned = await self._get_owned(user_id, issue_id, "delete")
            if owned.is_err():
                return Return.err(owned.error)

            await self.uow.issues.delete(owned.value)
            await self.uow.commit()

        logger.info(f"Issue {issue_id} deleted by owner {user_id}")
        return Return.ok(None)
