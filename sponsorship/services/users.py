# sponsorship/services/users.py
from __future__ import annotations

from typing import Optional

from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.repository import Repository
from sponsorship.models.user import IdentityAccount, User

logger = get_structlog_logger(__name__)


async def get_user(repo: Repository, user_id: Optional[str]) -> Optional[User]:
    return await repo.get(User, user_id)


async def get_user_by_fid(repo: Repository, fid: str) -> Optional[User]:
    return await repo.find_one(User, where={"fid": fid})


async def upsert_user(
    repo: Repository,
    fid: str,
    username: Optional[str] = None,
    display_name: Optional[str] = None,
    pfp_url: Optional[str] = None,
) -> User:
    """Create the user for ``fid`` or refresh the profile fields supplied.

    Fields left as ``None`` keep their stored value. When a username is
    given the identity account for the fid is created or re-pointed at
    this user in the same transaction.
    """
    async with repo.unit_of_work():
        user = await get_user_by_fid(repo, fid)
        if user is None:
            user = await repo.add(
                User(fid=fid, username=username, display_name=display_name, pfp_url=pfp_url)
            )
            logger.info("user.created", user_id=user.id, fid=fid)
        else:
            changes = {
                key: value
                for key, value in (
                    ("username", username),
                    ("display_name", display_name),
                    ("pfp_url", pfp_url),
                )
                if value is not None
            }
            if changes:
                await repo.update(user, **changes)
            logger.info("user.refreshed", user_id=user.id, fid=fid, fields=sorted(changes))

        if username:
            await link_identity_account(repo, user.id, fid, username)

    return user


async def link_identity_account(repo: Repository, user_id: str, fid: str, username: str) -> IdentityAccount:
    account = await repo.find_one(IdentityAccount, where={"fid": fid})
    if account is None:
        account = await repo.add(IdentityAccount(user_id=user_id, fid=fid, username=username))
        logger.info("identity_account.linked", user_id=user_id, fid=fid)
    else:
        await repo.update(account, user_id=user_id, username=username)
    return account
