"""Clients for remote sites, webhooks and the AI query service."""
import httpx
from typing import Dict, List, Any
from config.settings import settings
from exceptions import UpstreamServiceError
import logging

logger = logging.getLogger(__name__)

# Shared HTTP client, closed on application shutdown
http_client = httpx.AsyncClient(timeout=settings.HTTP_DEFAULT_TIMEOUT)

SITE_INFO_PATH = "/api/v1/public/site-info"
FOLLOW_FROM_PATH = "/api/v1/follows/follow-from"
UNFOLLOW_FROM_PATH = "/api/v1/follows/unfollow-from"


async def close_http_client():
    await http_client.aclose()


class RemoteSiteClient:
    """
    Client for another instance of this application.

    Every call is a single attempt; any transport error, non-2xx status or
    undecodable body is raised as ``UpstreamServiceError``.
    """

    @staticmethod
    async def _request(method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await http_client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.error(f"[RemoteSite] {method} {url} returned {e.response.status_code}")
            raise UpstreamServiceError(url, f"Remote site responded with {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"[RemoteSite] {method} {url} failed: {e}")
            raise UpstreamServiceError(url, f"Remote site unreachable: {e}")

    @staticmethod
    async def get_site_info(origin: str) -> Dict[str, Any]:
        """
        Fetch ``{id, name, image}`` describing the remote site's owner.

        Args:
            origin: Remote site origin, e.g. ``https://notes.example.com``
        """
        url = origin + SITE_INFO_PATH
        response = await RemoteSiteClient._request("GET", url)
        try:
            data = response.json()
        except ValueError:
            logger.error(f"[RemoteSite] {url} returned a non-JSON body")
            raise UpstreamServiceError(url, "Remote site returned an invalid site info body")
        if not isinstance(data, dict):
            raise UpstreamServiceError(url, "Remote site returned an invalid site info body")
        return data

    @staticmethod
    async def notify_follow(origin: str, payload: Dict[str, Any]) -> None:
        """Ask the remote site to record us as a follower."""
        await RemoteSiteClient._request("POST", origin + FOLLOW_FROM_PATH, json=payload)
        logger.info(f"[RemoteSite] Follow notification delivered to {origin}")

    @staticmethod
    async def notify_unfollow(origin: str, payload: Dict[str, Any]) -> None:
        """Ask the remote site to drop its follower row for us."""
        await RemoteSiteClient._request("POST", origin + UNFOLLOW_FROM_PATH, json=payload)
        logger.info(f"[RemoteSite] Unfollow notification delivered to {origin}")


class WebhookClient:
    """Fire-and-forget note event notifications."""

    @staticmethod
    async def send(note: Dict[str, Any], action: str, account_id: int) -> bool:
        """
        POST a note event to ``WEBHOOK_URL``.

        Failures are logged and reported through the return value, never
        raised, since the note change has already been committed.

        Returns:
            True when the webhook accepted the event
        """
        if not settings.WEBHOOK_URL:
            return False

        payload = {
            "event": f"note.{action}",
            "accountId": account_id,
            "data": note,
        }
        try:
            response = await http_client.post(settings.WEBHOOK_URL, json=payload)
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"[Webhook] note.{action} for note {note.get('id')} failed: {e}")
            return False


class AiQueryClient:
    """Client for the semantic query enhancement service."""

    @staticmethod
    def is_enabled() -> bool:
        return bool(settings.AI_SERVICE_URL)

    @staticmethod
    async def enhance_query(query: str, account_id: int) -> List[int]:
        """
        Resolve a free-text query to matching note ids.

        Returns:
            Note ids ordered by relevance
        """
        url = f"{settings.AI_SERVICE_URL.rstrip('/')}/enhance-query"
        headers = {"Content-Type": "application/json"}
        if settings.AI_SERVICE_API_KEY:
            headers["Authorization"] = f"Bearer {settings.AI_SERVICE_API_KEY}"

        try:
            response = await http_client.post(
                url,
                headers=headers,
                json={"query": query, "accountId": account_id}
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPError as e:
            logger.error(f"[AI] Query enhancement failed: {e}")
            raise UpstreamServiceError("ai-service", "AI query service unavailable")
        except ValueError:
            logger.error("[AI] Query enhancement returned a non-JSON body")
            raise UpstreamServiceError("ai-service", "AI query service returned an invalid body")

        note_ids = result.get("noteIds") if isinstance(result, dict) else None
        if not isinstance(note_ids, list):
            raise UpstreamServiceError("ai-service", "AI query service returned an invalid body")
        try:
            return [int(i) for i in note_ids]
        except (TypeError, ValueError):
            logger.error(f"[AI] Query enhancement returned non-numeric note ids: {note_ids}")
            raise UpstreamServiceError("ai-service", "AI query service returned an invalid body")
