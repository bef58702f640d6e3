"""Follow service business logic."""
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from exceptions import AlreadyFollowing, ResourceNotFound
from models.follow import Follow
from repositories.follow_repository import FollowRepository
from repositories.account_repository import AccountRepository
from utils.business_rules import normalize_origin
from utils.external_services import RemoteSiteClient
import logging

logger = logging.getLogger(__name__)


def _absolute(origin: str, path: Optional[str]) -> str:
    """Resolve a site-relative image path against the site origin."""
    if not path:
        return ""
    if path.startswith(("http://", "https://")):
        return path
    return origin + path


class FollowService:
    """
    Service for follow relations between sites.

    Following is recorded on both sides: a "following" row here and a
    "follower" row on the remote site, created through its public
    ``follow-from`` endpoint.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.follow_repo = FollowRepository(db)
        self.account_repo = AccountRepository(db)

    async def follow(self, account_id: int, site_url: str, my_site_url: str) -> dict:
        """
        Follow a remote site.

        The local row is committed before the remote site is notified; if the
        notification fails the error is raised and the local row stays.

        Raises:
            AlreadyFollowing: The account already follows the site
            UpstreamServiceError: The remote site could not be reached
        """
        site_url = normalize_origin(site_url, "siteUrl")
        my_site_url = normalize_origin(my_site_url, "mySiteUrl")

        if await self.follow_repo.get(account_id, site_url, Follow.TYPE_FOLLOWING):
            raise AlreadyFollowing(site_url)

        site_info = await RemoteSiteClient.get_site_info(site_url)
        follow = await self.follow_repo.create(
            account_id,
            site_url,
            Follow.TYPE_FOLLOWING,
            site_name=site_info.get("name"),
            site_avatar=_absolute(site_url, site_info.get("image")),
        )
        account = await self.account_repo.get_by_id(account_id)
        await self.db.commit()
        logger.info(f"Account {account_id} now follows {site_url}")

        await RemoteSiteClient.notify_follow(site_url, {
            "mySiteAccountId": site_info.get("id"),
            "siteUrl": my_site_url,
            "siteName": account.display_name if account else "",
            "siteAvatar": _absolute(my_site_url, account.image if account else None),
        })
        return {"success": True, "data": follow.to_dict()}

    async def follow_from(
        self,
        my_site_account_id: int,
        site_url: str,
        site_name: str,
        site_avatar: str
    ) -> dict:
        """Record that a remote site follows a local account. Idempotent."""
        site_url = normalize_origin(site_url, "siteUrl")

        existing = await self.follow_repo.get(my_site_account_id, site_url, Follow.TYPE_FOLLOWER)
        if existing:
            return {"success": True, "data": existing.to_dict()}

        if not await self.account_repo.get_by_id(my_site_account_id):
            raise ResourceNotFound("Account", my_site_account_id)

        follow = await self.follow_repo.create(
            my_site_account_id,
            site_url,
            Follow.TYPE_FOLLOWER,
            site_name=site_name,
            site_avatar=site_avatar,
        )
        await self.db.commit()
        logger.info(f"{site_url} now follows account {my_site_account_id}")
        return {"success": True, "data": follow.to_dict()}

    async def unfollow(self, account_id: int, site_url: str, my_site_url: str) -> bool:
        """
        Stop following a remote site and tell it so.

        The remote site info is read first; its failure leaves everything
        unchanged. A failed notification after the local delete is raised.
        """
        site_url = normalize_origin(site_url, "siteUrl")
        my_site_url = normalize_origin(my_site_url, "mySiteUrl")

        site_info = await RemoteSiteClient.get_site_info(site_url)
        removed = await self.follow_repo.remove(account_id, site_url, Follow.TYPE_FOLLOWING)
        await self.db.commit()
        logger.info(f"Account {account_id} unfollowed {site_url} ({removed} row(s))")

        await RemoteSiteClient.notify_unfollow(site_url, {
            "mySiteAccountId": site_info.get("id"),
            "siteUrl": my_site_url,
        })
        return True

    async def unfollow_from(self, site_url: str, my_site_account_id: int) -> bool:
        """Drop the follower row a remote site holds on a local account."""
        site_url = normalize_origin(site_url, "siteUrl")
        await self.follow_repo.remove(my_site_account_id, site_url, Follow.TYPE_FOLLOWER)
        await self.db.commit()
        return True

    async def follow_list(self, account_id: int, user_id: Optional[int] = None) -> List[dict]:
        """Sites followed by ``user_id``, defaulting to the caller."""
        follows = await self.follow_repo.list_by_type(user_id or account_id, Follow.TYPE_FOLLOWING)
        return [f.to_dict() for f in follows]

    async def follower_list(self, account_id: int, user_id: Optional[int] = None) -> List[dict]:
        """Sites following ``user_id``, defaulting to the caller."""
        follows = await self.follow_repo.list_by_type(user_id or account_id, Follow.TYPE_FOLLOWER)
        return [f.to_dict() for f in follows]

    async def is_following(self, account_id: int, site_url: str) -> dict:
        """Whether the caller has any relation with the site."""
        site_url = normalize_origin(site_url, "siteUrl")
        return {"success": True, "data": await self.follow_repo.exists(account_id, site_url)}
