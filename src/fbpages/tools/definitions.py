"""The Facebook Pages tool table.

One :class:`ToolDescriptor` per tool, in the order they are advertised.
``operation`` names the :class:`~fbpages.graph.client.GraphClient`
method that serves the tool.
"""

from __future__ import annotations

from typing import Any

from fbpages.tools.base import ToolDescriptor, ToolHints

READ = ToolHints(read_only=True, destructive=False, open_world=True)
READ_LOCAL = ToolHints(read_only=True, destructive=False, open_world=False)
WRITE = ToolHints(read_only=False, destructive=False, open_world=True)
WRITE_LOCAL = ToolHints(read_only=False, destructive=False, open_world=False)
EDIT = ToolHints(read_only=False, destructive=False, idempotent=True, open_world=False)
DELETE = ToolHints(read_only=False, destructive=True, open_world=False)


def _string(description: str) -> dict[str, str]:
    return {"type": "string", "description": description}


def _number(description: str) -> dict[str, str]:
    return {"type": "number", "description": description}


def _boolean(description: str) -> dict[str, str]:
    return {"type": "boolean", "description": description}


def _schema(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


PAGE_ID = _string("Facebook Page ID")
POST_ID = _string("Facebook Post ID (format: pageId_postId)")
PERIOD = _string('Aggregation period: "day", "week", or "days_28" (default: day)')


TOOLS: list[ToolDescriptor] = [
    # ── Pages ─────────────────────────────────────────────────
    ToolDescriptor(
        name="fb_list_pages",
        title="List Pages",
        description=(
            "List all Facebook Pages the user manages. Returns page ID, name, "
            "category, and access token for each page. Use this to find the "
            "page_id for other tools."
        ),
        input_schema=_schema(
            {
                "_info": _string(
                    "No parameters required. Uses the configured Page Access "
                    "Token to list all managed pages."
                ),
            }
        ),
        operation="list_pages",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_get_page",
        title="Get Page Info",
        description=(
            "Get detailed information about a Facebook Page: name, category, "
            "followers, fan count, about, description, website, and more."
        ),
        input_schema=_schema(
            {
                "page_id": _string(
                    "Facebook Page ID (numeric). Use fb_list_pages to find this."
                ),
                "fields": _string(
                    "Comma-separated fields to return (e.g. "
                    '"name,category,fan_count,followers_count,about,website"). '
                    "Default: all basic fields."
                ),
            },
            ["page_id"],
        ),
        operation="get_page",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_get_page_token",
        title="Get Page Token",
        description=(
            "Get the Page Access Token for a specific page. Useful when "
            "managing multiple pages, since each page has its own token."
        ),
        input_schema=_schema(
            {"page_id": _string("Facebook Page ID to get the access token for")},
            ["page_id"],
        ),
        operation="get_page_token",
        hints=READ_LOCAL,
    ),
    # ── Posts ─────────────────────────────────────────────────
    ToolDescriptor(
        name="fb_list_posts",
        title="List Posts",
        description=(
            "List posts from a Facebook Page feed. Returns post ID, message, "
            "creation time, picture, and permalink. Supports pagination via "
            "limit parameter."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "limit": _number("Number of posts to return (default: 25, max: 100)"),
                "fields": _string(
                    "Comma-separated fields (e.g. "
                    '"id,message,created_time,shares,likes.summary(true)")'
                ),
            },
            ["page_id"],
        ),
        operation="list_posts",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_get_post",
        title="Get Post",
        description=(
            "Get details of a single Facebook post by ID. Returns message, "
            "creation time, picture, permalink, and engagement counts."
        ),
        input_schema=_schema(
            {
                "post_id": POST_ID,
                "fields": _string(
                    "Comma-separated fields to return (e.g. "
                    '"id,message,created_time,shares,likes.summary(true),'
                    'comments.summary(true)")'
                ),
            },
            ["post_id"],
        ),
        operation="get_post",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_create_post",
        title="Create Post",
        description=(
            "Create a new post on a Facebook Page. Can include text message "
            "and/or link. Set published=false to create an unpublished (draft) post."
        ),
        input_schema=_schema(
            {
                "page_id": _string("Facebook Page ID to post to"),
                "message": _string("Text content of the post"),
                "link": _string("URL to attach to the post (creates link preview)"),
                "published": _boolean(
                    "Set to false to create an unpublished/draft post (default: true)"
                ),
            },
            ["page_id"],
        ),
        operation="create_post",
        hints=WRITE,
    ),
    ToolDescriptor(
        name="fb_update_post",
        title="Update Post",
        description=(
            "Update the text message of an existing Facebook post. Only the "
            "message field can be edited after creation."
        ),
        input_schema=_schema(
            {
                "post_id": _string("Facebook Post ID to update (format: pageId_postId)"),
                "message": _string("New text content for the post"),
            },
            ["post_id", "message"],
        ),
        operation="update_post",
        hints=EDIT,
    ),
    ToolDescriptor(
        name="fb_delete_post",
        title="Delete Post",
        description="Permanently delete a Facebook post. This action cannot be undone.",
        input_schema=_schema(
            {"post_id": _string("Facebook Post ID to delete (format: pageId_postId)")},
            ["post_id"],
        ),
        operation="delete_post",
        hints=DELETE,
    ),
    ToolDescriptor(
        name="fb_schedule_post",
        title="Schedule Post",
        description=(
            "Schedule a post to be published at a future time. The "
            "scheduled_time must be between 10 minutes and 75 days from now "
            "(Unix timestamp in seconds)."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "message": _string("Text content of the scheduled post"),
                "scheduled_time": _number(
                    "Unix timestamp (seconds) for when to publish. "
                    "Must be 10min-75days from now."
                ),
                "link": _string("Optional URL to attach to the post"),
            },
            ["page_id", "message", "scheduled_time"],
        ),
        operation="schedule_post",
        hints=WRITE,
    ),
    # ── Comments ──────────────────────────────────────────────
    ToolDescriptor(
        name="fb_list_comments",
        title="List Comments",
        description=(
            "List comments on a Facebook post or object. Returns comment ID, "
            "message, author, time, like count, and hidden status."
        ),
        input_schema=_schema(
            {
                "object_id": _string("Post ID or object ID to get comments from"),
                "limit": _number("Number of comments to return (default: 25)"),
            },
            ["object_id"],
        ),
        operation="list_comments",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_create_comment",
        title="Create Comment",
        description=(
            "Add a comment to a Facebook post. The page will be shown as the "
            "comment author."
        ),
        input_schema=_schema(
            {
                "object_id": _string("Post ID to comment on"),
                "message": _string("Comment text"),
            },
            ["object_id", "message"],
        ),
        operation="create_comment",
        hints=WRITE,
    ),
    ToolDescriptor(
        name="fb_reply_comment",
        title="Reply to Comment",
        description=(
            "Reply to an existing comment. Creates a threaded reply under the "
            "specified comment."
        ),
        input_schema=_schema(
            {
                "comment_id": _string("Comment ID to reply to"),
                "message": _string("Reply text"),
            },
            ["comment_id", "message"],
        ),
        operation="reply_comment",
        hints=WRITE,
    ),
    ToolDescriptor(
        name="fb_delete_comment",
        title="Delete Comment",
        description="Permanently delete a comment. This action cannot be undone.",
        input_schema=_schema(
            {"comment_id": _string("Comment ID to delete")},
            ["comment_id"],
        ),
        operation="delete_comment",
        hints=DELETE,
    ),
    ToolDescriptor(
        name="fb_hide_comment",
        title="Hide/Unhide Comment",
        description=(
            "Hide or unhide a comment. Hidden comments are only visible to the "
            "author and page admins. Useful for moderation."
        ),
        input_schema=_schema(
            {
                "comment_id": _string("Comment ID to hide/unhide"),
                "is_hidden": _boolean("true to hide, false to unhide"),
            },
            ["comment_id", "is_hidden"],
        ),
        operation="hide_comment",
        hints=EDIT,
    ),
    # ── Photos ────────────────────────────────────────────────
    ToolDescriptor(
        name="fb_upload_photo",
        title="Upload Photo",
        description=(
            "Upload a photo to a Facebook Page from a URL. Can include a "
            "caption. Set published=false for an unpublished photo (use in "
            "multi-photo posts)."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "url": _string("Public URL of the photo to upload"),
                "caption": _string("Caption text for the photo"),
                "published": _boolean(
                    "Set to false for unpublished photo (default: true)"
                ),
            },
            ["page_id", "url"],
        ),
        operation="upload_photo",
        hints=WRITE,
    ),
    ToolDescriptor(
        name="fb_list_photos",
        title="List Photos",
        description=(
            "List photos uploaded to a Facebook Page. Returns photo ID, name, "
            "link, creation time, and image URLs at various sizes."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "limit": _number("Number of photos to return (default: 25)"),
            },
            ["page_id"],
        ),
        operation="list_photos",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_delete_photo",
        title="Delete Photo",
        description="Permanently delete a photo from a Facebook Page.",
        input_schema=_schema(
            {"photo_id": _string("Photo ID to delete")},
            ["photo_id"],
        ),
        operation="delete_photo",
        hints=DELETE,
    ),
    # ── Videos ────────────────────────────────────────────────
    ToolDescriptor(
        name="fb_upload_video",
        title="Upload Video",
        description=(
            "Upload a video to a Facebook Page from a URL. Supports title and "
            "description. For large videos (>1GB), use chunked upload via "
            "Facebook UI."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "file_url": _string("Public URL of the video file to upload"),
                "title": _string("Video title"),
                "description": _string("Video description"),
            },
            ["page_id", "file_url"],
        ),
        operation="upload_video",
        hints=WRITE,
    ),
    ToolDescriptor(
        name="fb_list_videos",
        title="List Videos",
        description=(
            "List videos uploaded to a Facebook Page. Returns video ID, title, "
            "description, creation time, duration, and source URL."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "limit": _number("Number of videos to return (default: 25)"),
            },
            ["page_id"],
        ),
        operation="list_videos",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_delete_video",
        title="Delete Video",
        description="Permanently delete a video from a Facebook Page.",
        input_schema=_schema(
            {"video_id": _string("Video ID to delete")},
            ["video_id"],
        ),
        operation="delete_video",
        hints=DELETE,
    ),
    # ── Insights ──────────────────────────────────────────────
    ToolDescriptor(
        name="fb_get_page_insights",
        title="Get Page Insights",
        description=(
            "Get analytics metrics for a Facebook Page. Common metrics: "
            "page_impressions, page_engaged_users, page_post_engagements, "
            "page_fan_adds. Period: day, week, days_28."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "metric": _string(
                    "Comma-separated metrics (e.g. "
                    '"page_impressions,page_engaged_users,page_post_engagements")'
                ),
                "period": PERIOD,
                "since": _string("Start date in YYYY-MM-DD format or Unix timestamp"),
                "until": _string(
                    "End date in YYYY-MM-DD format or Unix timestamp (max 90 days range)"
                ),
            },
            ["page_id", "metric"],
        ),
        operation="get_page_insights",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_get_post_insights",
        title="Get Post Insights",
        description=(
            "Get analytics for a specific post. Common metrics: "
            "post_impressions, post_engaged_users, post_clicks, "
            "post_reactions_by_type_total."
        ),
        input_schema=_schema(
            {
                "post_id": POST_ID,
                "metric": _string(
                    "Comma-separated metrics (e.g. "
                    '"post_impressions,post_engaged_users,post_clicks")'
                ),
            },
            ["post_id", "metric"],
        ),
        operation="get_post_insights",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_get_page_fans",
        title="Get Page Fans",
        description=(
            "Get total fan (follower) count for a Facebook Page over time. "
            "Returns daily values showing the total page likes."
        ),
        input_schema=_schema({"page_id": PAGE_ID}, ["page_id"]),
        operation="get_page_fans",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_get_page_views",
        title="Get Page Views",
        description=(
            "Get page view count over time. Returns total number of times the "
            "Page profile was viewed."
        ),
        input_schema=_schema({"page_id": PAGE_ID, "period": PERIOD}, ["page_id"]),
        operation="get_page_views",
        hints=READ,
    ),
    # ── Conversations ─────────────────────────────────────────
    ToolDescriptor(
        name="fb_list_conversations",
        title="List Conversations",
        description=(
            "List Messenger conversations for a Facebook Page. Returns "
            "conversation ID, last update time, snippet, message count, and "
            "participants."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "limit": _number("Number of conversations to return (default: 25)"),
            },
            ["page_id"],
        ),
        operation="list_conversations",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_get_messages",
        title="Get Messages",
        description=(
            "Get messages from a specific Messenger conversation. Returns "
            "message ID, text, sender, and time."
        ),
        input_schema=_schema(
            {
                "conversation_id": _string("Conversation ID from fb_list_conversations"),
                "limit": _number("Number of messages to return (default: 25)"),
            },
            ["conversation_id"],
        ),
        operation="get_messages",
        hints=READ,
    ),
    ToolDescriptor(
        name="fb_send_message",
        title="Send Message",
        description=(
            "Send a text message via Messenger to a user. Requires the "
            "recipient PSID (Page-Scoped ID). Note: the 24-hour messaging "
            "window applies, so you can only respond within 24h of the user's "
            "last message."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "recipient_id": _string(
                    "Recipient PSID (Page-Scoped User ID). Found in conversation participants."
                ),
                "text": _string("Message text to send (max 2000 characters)"),
            },
            ["page_id", "recipient_id", "text"],
        ),
        operation="send_message",
        hints=WRITE,
    ),
    ToolDescriptor(
        name="fb_send_typing",
        title="Send Typing Indicator",
        description=(
            "Show or hide the typing indicator in Messenger. Use before sending "
            "a message for a more natural conversation feel."
        ),
        input_schema=_schema(
            {
                "page_id": PAGE_ID,
                "recipient_id": _string("Recipient PSID (Page-Scoped User ID)"),
                "action": _string(
                    'Typing action: "typing_on", "typing_off", or "mark_seen" '
                    "(default: typing_on)"
                ),
            },
            ["page_id", "recipient_id"],
        ),
        operation="send_typing",
        hints=WRITE_LOCAL,
    ),
]
