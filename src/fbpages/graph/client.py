"""GraphClient -- async adapter for the Facebook Pages Graph API.

Each public method performs exactly one HTTP request and returns a
:class:`~fbpages.tools.base.Success` or :class:`~fbpages.tools.base.Failure`.
An ``error`` object in the response body is authoritative whatever the
HTTP status. Network and JSON decoding errors are not caught here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from fbpages.tools.base import ErrorKind, Failure, InvocationResult, Success

if TYPE_CHECKING:
    from fbpages.config.schema import GraphConfig

POST_FIELDS = "id,message,created_time,updated_time,full_picture,permalink_url"
POST_DETAIL_FIELDS = f"{POST_FIELDS},shares"
COMMENT_FIELDS = "id,message,from,created_time,like_count,is_hidden"
PHOTO_FIELDS = "id,name,link,created_time,images"
VIDEO_FIELDS = "id,title,description,created_time,length,source"
CONVERSATION_FIELDS = "id,updated_time,snippet,message_count,participants"
MESSAGE_FIELDS = "id,message,from,created_time"


def _format_count(value: int | float) -> str:
    """Render a numeric query value the way the Graph API expects (``25``, not ``25.0``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _error_code(value: Any) -> int | None:
    """Numeric Graph error code; ``"190"`` becomes ``190``, anything else ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return None


@dataclass(frozen=True, slots=True)
class Credential:
    """Page Access Token plus an optional default Page ID."""

    access_token: str = field(repr=False)
    page_id: str | None = None

    def masked(self) -> str:
        """Log-safe rendering."""
        return "***configured***"

    @classmethod
    def from_config(cls, config: GraphConfig) -> Credential | None:
        if not config.access_token:
            return None
        return cls(access_token=config.access_token, page_id=config.page_id)


def create_http_client(config: GraphConfig) -> httpx.AsyncClient:
    """Create the shared HTTP client rooted at the versioned Graph URL."""
    return httpx.AsyncClient(
        base_url=config.api_url,
        timeout=config.timeout,
    )


class GraphClient:
    """Client for the Facebook Pages Graph API.

    Usage::

        async with create_http_client(config.graph) as http:
            client = GraphClient(Credential("EAAB..."), http=http)
            result = await client.list_posts("1234567890", limit=5)
    """

    def __init__(self, credential: Credential, *, http: httpx.AsyncClient) -> None:
        self._credential = credential
        self._http = http

    @property
    def credential(self) -> Credential:
        return self._credential

    async def _request(
        self,
        path: str,
        method: str = "GET",
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> InvocationResult:
        query = {"access_token": self._credential.access_token}
        if params:
            query.update(params)

        json_body = body if body is not None and method in ("POST", "DELETE") else None
        response = await self._http.request(method, path, params=query, json=json_body)
        data = response.json()

        if isinstance(data, dict) and data.get("error") is not None:
            error = data["error"]
            if not isinstance(error, dict):
                return Failure(ErrorKind.REMOTE_API, str(error))
            return Failure(
                ErrorKind.REMOTE_API,
                error.get("message") or "Unknown error",
                _error_code(error.get("code")),
            )
        if response.status_code >= 400:
            return Failure(
                ErrorKind.TRANSPORT,
                f"Graph API returned HTTP {response.status_code}",
            )
        return Success(data)

    async def _list(self, path: str, params: dict[str, str]) -> InvocationResult:
        result = await self._request(path, params=params)
        if isinstance(result, Failure):
            return result
        payload = result.payload if isinstance(result.payload, dict) else {}
        return Success(payload.get("data") or [])

    # -- Pages -----------------------------------------------------------------

    async def list_pages(self) -> InvocationResult:
        return await self._list("me/accounts", {})

    async def get_page(self, page_id: str, fields: str | None = None) -> InvocationResult:
        params: dict[str, str] = {}
        if fields:
            params["fields"] = fields
        return await self._request(page_id, params=params)

    async def get_page_token(self, page_id: str) -> InvocationResult:
        return await self._request(page_id, params={"fields": "access_token"})

    # -- Posts -----------------------------------------------------------------

    async def list_posts(
        self, page_id: str, limit: int | None = None, fields: str | None = None
    ) -> InvocationResult:
        params: dict[str, str] = {"fields": fields or POST_FIELDS}
        if limit:
            params["limit"] = _format_count(limit)
        return await self._list(f"{page_id}/feed", params)

    async def get_post(self, post_id: str, fields: str | None = None) -> InvocationResult:
        return await self._request(post_id, params={"fields": fields or POST_DETAIL_FIELDS})

    async def create_post(
        self,
        page_id: str,
        message: str | None = None,
        link: str | None = None,
        published: bool | None = None,
    ) -> InvocationResult:
        body: dict[str, Any] = {}
        if message:
            body["message"] = message
        if link:
            body["link"] = link
        if published is not None:
            body["published"] = published
        return await self._request(f"{page_id}/feed", "POST", body=body)

    async def update_post(self, post_id: str, message: str) -> InvocationResult:
        return await self._request(post_id, "POST", body={"message": message})

    async def delete_post(self, post_id: str) -> InvocationResult:
        return await self._request(post_id, "DELETE")

    async def schedule_post(
        self,
        page_id: str,
        message: str,
        scheduled_time: int | float,
        link: str | None = None,
    ) -> InvocationResult:
        # The 10 minute to 75 day window is enforced by the Graph API.
        body: dict[str, Any] = {
            "message": message,
            "published": False,
            "scheduled_publish_time": scheduled_time,
        }
        if link:
            body["link"] = link
        return await self._request(f"{page_id}/feed", "POST", body=body)

    # -- Comments --------------------------------------------------------------

    async def list_comments(self, object_id: str, limit: int | None = None) -> InvocationResult:
        params = {"fields": COMMENT_FIELDS}
        if limit:
            params["limit"] = _format_count(limit)
        return await self._list(f"{object_id}/comments", params)

    async def create_comment(self, object_id: str, message: str) -> InvocationResult:
        return await self._request(f"{object_id}/comments", "POST", body={"message": message})

    async def reply_comment(self, comment_id: str, message: str) -> InvocationResult:
        return await self._request(f"{comment_id}/comments", "POST", body={"message": message})

    async def delete_comment(self, comment_id: str) -> InvocationResult:
        return await self._request(comment_id, "DELETE")

    async def hide_comment(self, comment_id: str, is_hidden: bool) -> InvocationResult:
        return await self._request(comment_id, "POST", body={"is_hidden": is_hidden})

    # -- Photos ----------------------------------------------------------------

    async def upload_photo(
        self,
        page_id: str,
        url: str,
        caption: str | None = None,
        published: bool | None = None,
    ) -> InvocationResult:
        body: dict[str, Any] = {"url": url}
        if caption:
            body["message"] = caption
        if published is not None:
            body["published"] = published
        return await self._request(f"{page_id}/photos", "POST", body=body)

    async def list_photos(self, page_id: str, limit: int | None = None) -> InvocationResult:
        params = {"fields": PHOTO_FIELDS}
        if limit:
            params["limit"] = _format_count(limit)
        return await self._list(f"{page_id}/photos", params)

    async def delete_photo(self, photo_id: str) -> InvocationResult:
        return await self._request(photo_id, "DELETE")

    # -- Videos ----------------------------------------------------------------

    async def upload_video(
        self,
        page_id: str,
        file_url: str,
        title: str | None = None,
        description: str | None = None,
    ) -> InvocationResult:
        body: dict[str, Any] = {"file_url": file_url}
        if title:
            body["title"] = title
        if description:
            body["description"] = description
        return await self._request(f"{page_id}/videos", "POST", body=body)

    async def list_videos(self, page_id: str, limit: int | None = None) -> InvocationResult:
        params = {"fields": VIDEO_FIELDS}
        if limit:
            params["limit"] = _format_count(limit)
        return await self._list(f"{page_id}/videos", params)

    async def delete_video(self, video_id: str) -> InvocationResult:
        return await self._request(video_id, "DELETE")

    # -- Insights --------------------------------------------------------------

    async def get_page_insights(
        self,
        page_id: str,
        metric: str,
        period: str | None = None,
        since: str | None = None,
        until: str | None = None,
    ) -> InvocationResult:
        params = {"metric": metric}
        if period:
            params["period"] = period
        if since:
            params["since"] = since
        if until:
            params["until"] = until
        return await self._list(f"{page_id}/insights", params)

    async def get_post_insights(self, post_id: str, metric: str) -> InvocationResult:
        return await self._list(f"{post_id}/insights", {"metric": metric})

    async def get_page_fans(self, page_id: str) -> InvocationResult:
        return await self._list(f"{page_id}/insights", {"metric": "page_fans", "period": "day"})

    async def get_page_views(self, page_id: str, period: str | None = None) -> InvocationResult:
        params = {"metric": "page_views_total", "period": period or "day"}
        return await self._list(f"{page_id}/insights", params)

    # -- Conversations ---------------------------------------------------------

    async def list_conversations(self, page_id: str, limit: int | None = None) -> InvocationResult:
        params = {"fields": CONVERSATION_FIELDS}
        if limit:
            params["limit"] = _format_count(limit)
        return await self._list(f"{page_id}/conversations", params)

    async def get_messages(self, conversation_id: str, limit: int | None = None) -> InvocationResult:
        params = {"fields": MESSAGE_FIELDS}
        if limit:
            params["limit"] = _format_count(limit)
        return await self._list(f"{conversation_id}/messages", params)

    async def send_message(self, page_id: str, recipient_id: str, text: str) -> InvocationResult:
        body = {
            "recipient": {"id": recipient_id},
            "message": {"text": text},
            "messaging_type": "RESPONSE",
        }
        return await self._request(f"{page_id}/messages", "POST", body=body)

    async def send_typing(
        self, page_id: str, recipient_id: str, action: str | None = None
    ) -> InvocationResult:
        body = {
            "recipient": {"id": recipient_id},
            "sender_action": action or "typing_on",
        }
        return await self._request(f"{page_id}/messages", "POST", body=body)
