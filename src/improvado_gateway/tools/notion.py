"""Notion REST passthrough tools.

Each tool maps one-to-one onto a Notion endpoint. Pagination cursors are
forwarded as given; the gateway never walks pages on its own.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field

from improvado_gateway.config.downstream import HTTPSettings, NotionSettings
from improvado_gateway.tools.base import (
    Downstream,
    FormattedArguments,
    ToolContext,
    ToolDescriptor,
)
from improvado_gateway.tools.http import read_json


JSONObject = dict[str, Any]


class NotionClient:
    """Thin async wrapper over the Notion API for a single exchanged token."""

    def __init__(
        self,
        token: str,
        http: httpx.AsyncClient,
        config: NotionSettings | None = None,
        http_config: HTTPSettings | None = None,
    ) -> None:
        self.config = config or NotionSettings()
        self.http_config = http_config or HTTPSettings()
        self.http = http
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Notion-Version": self.config.api_version,
            "User-Agent": self.http_config.user_agent,
        }

    @classmethod
    def from_context(cls, ctx: ToolContext) -> "NotionClient":
        return cls(
            ctx.credential,
            ctx.http,
            config=ctx.settings.notion,
            http_config=ctx.settings.http,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: JSONObject | None = None,
    ) -> Any:
        response = await self.http.request(
            method,
            f"{self.config.base_url}{path}",
            headers=self.headers,
            params=params,
            json=body,
            timeout=self.http_config.timeout,
        )
        return read_json(response)

    @staticmethod
    def _pagination(
        start_cursor: str | None, page_size: int | None
    ) -> dict[str, Any]:
        page: dict[str, Any] = {}
        if start_cursor is not None:
            page["start_cursor"] = start_cursor
        if page_size is not None:
            page["page_size"] = page_size
        return page

    # Blocks

    async def append_block_children(
        self, block_id: str, children: list[JSONObject], after: str | None = None
    ) -> Any:
        body: JSONObject = {"children": children}
        if after is not None:
            body["after"] = after
        return await self._request("PATCH", f"/blocks/{block_id}/children", body=body)

    async def retrieve_block(self, block_id: str) -> Any:
        return await self._request("GET", f"/blocks/{block_id}")

    async def retrieve_block_children(
        self,
        block_id: str,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> Any:
        return await self._request(
            "GET",
            f"/blocks/{block_id}/children",
            params=self._pagination(start_cursor, page_size),
        )

    async def delete_block(self, block_id: str) -> Any:
        return await self._request("DELETE", f"/blocks/{block_id}")

    # Pages

    async def retrieve_page(self, page_id: str) -> Any:
        return await self._request("GET", f"/pages/{page_id}")

    async def update_page_properties(
        self, page_id: str, properties: JSONObject
    ) -> Any:
        return await self._request(
            "PATCH", f"/pages/{page_id}", body={"properties": properties}
        )

    # Users

    async def list_all_users(
        self, start_cursor: str | None = None, page_size: int | None = None
    ) -> Any:
        return await self._request(
            "GET", "/users", params=self._pagination(start_cursor, page_size)
        )

    async def retrieve_user(self, user_id: str) -> Any:
        return await self._request("GET", f"/users/{user_id}")

    async def retrieve_bot_user(self) -> Any:
        return await self._request("GET", "/users/me")

    # Databases

    async def create_database(
        self, parent: JSONObject, title: list[JSONObject], properties: JSONObject
    ) -> Any:
        return await self._request(
            "POST",
            "/databases",
            body={"parent": parent, "title": title, "properties": properties},
        )

    async def query_database(
        self,
        database_id: str,
        filter: JSONObject | None = None,
        sorts: list[JSONObject] | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> Any:
        body: JSONObject = self._pagination(start_cursor, page_size)
        if filter is not None:
            body["filter"] = filter
        if sorts is not None:
            body["sorts"] = sorts
        return await self._request(
            "POST", f"/databases/{database_id}/query", body=body
        )

    async def retrieve_database(self, database_id: str) -> Any:
        return await self._request("GET", f"/databases/{database_id}")

    async def update_database(
        self,
        database_id: str,
        title: list[JSONObject] | None = None,
        description: list[JSONObject] | None = None,
        properties: JSONObject | None = None,
    ) -> Any:
        body: JSONObject = {}
        if title is not None:
            body["title"] = title
        if description is not None:
            body["description"] = description
        if properties is not None:
            body["properties"] = properties
        return await self._request("PATCH", f"/databases/{database_id}", body=body)

    async def create_database_item(
        self, database_id: str, properties: JSONObject
    ) -> Any:
        return await self._request(
            "POST",
            "/pages",
            body={"parent": {"database_id": database_id}, "properties": properties},
        )

    # Comments

    async def create_comment(
        self,
        rich_text: list[JSONObject],
        parent: JSONObject | None = None,
        discussion_id: str | None = None,
    ) -> Any:
        body: JSONObject = {"rich_text": rich_text}
        if parent is not None:
            body["parent"] = parent
        if discussion_id is not None:
            body["discussion_id"] = discussion_id
        return await self._request("POST", "/comments", body=body)

    async def retrieve_comments(
        self,
        block_id: str,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> Any:
        params = {"block_id": block_id, **self._pagination(start_cursor, page_size)}
        return await self._request("GET", "/comments", params=params)

    # Search

    async def search(
        self,
        query: str | None = None,
        filter: JSONObject | None = None,
        sort: JSONObject | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> Any:
        body: JSONObject = self._pagination(start_cursor, page_size)
        if query is not None:
            body["query"] = query
        if filter is not None:
            body["filter"] = filter
        if sort is not None:
            body["sort"] = sort
        return await self._request("POST", "/search", body=body)


# =============================================================================
# Argument models
# =============================================================================

def _start_cursor_field() -> Any:
    return Field(default=None, description="Pagination start cursor")


def _page_size_field() -> Any:
    return Field(default=None, ge=1, le=100, description="Number of results (max 100)")


class BlockArguments(FormattedArguments):
    block_id: str = Field(description="The ID of the block")


class AppendBlockChildrenArguments(BlockArguments):
    children: list[JSONObject] = Field(description="Array of block objects to append")
    after: str | None = Field(
        default=None, description="ID of the existing block to append after"
    )


class RetrieveBlockChildrenArguments(BlockArguments):
    start_cursor: str | None = _start_cursor_field()
    page_size: int | None = _page_size_field()


class PageArguments(FormattedArguments):
    page_id: str = Field(description="The ID of the page")


class UpdatePagePropertiesArguments(PageArguments):
    properties: JSONObject = Field(description="Properties to update")


class ListAllUsersArguments(FormattedArguments):
    start_cursor: str | None = _start_cursor_field()
    page_size: int | None = _page_size_field()


class RetrieveUserArguments(FormattedArguments):
    user_id: str = Field(description="The ID of the user")


class RetrieveBotUserArguments(FormattedArguments):
    random_string: str | None = Field(
        default=None, description="Unused placeholder accepted for client compatibility"
    )


class DatabaseParent(BaseModel):
    type: str
    page_id: str | None = None
    database_id: str | None = None
    workspace: bool | None = None


class CreateDatabaseArguments(FormattedArguments):
    parent: DatabaseParent = Field(description="Parent object of the database")
    title: list[JSONObject] = Field(description="Title of the database as rich text")
    properties: JSONObject = Field(description="Property schema of the database")


class DatabaseArguments(FormattedArguments):
    database_id: str = Field(description="The ID of the database")


class DatabaseSort(BaseModel):
    property: str | None = None
    timestamp: str | None = None
    direction: Literal["ascending", "descending"]


class QueryDatabaseArguments(DatabaseArguments):
    filter: JSONObject | None = Field(default=None, description="Filter conditions")
    sorts: list[DatabaseSort] | None = Field(default=None, description="Sort conditions")
    start_cursor: str | None = _start_cursor_field()
    page_size: int | None = _page_size_field()


class UpdateDatabaseArguments(DatabaseArguments):
    title: list[JSONObject] | None = Field(default=None, description="New title")
    description: list[JSONObject] | None = Field(
        default=None, description="New description"
    )
    properties: JSONObject | None = Field(
        default=None, description="Updated property schema"
    )


class CreateDatabaseItemArguments(DatabaseArguments):
    properties: JSONObject = Field(description="Properties of the new item")


class CommentParent(BaseModel):
    page_id: str


class CreateCommentArguments(FormattedArguments):
    parent: CommentParent | None = Field(
        default=None, description="Page to comment on (omit when replying)"
    )
    discussion_id: str | None = Field(
        default=None, description="Existing discussion thread to reply to"
    )
    rich_text: list[JSONObject] = Field(description="Comment content as rich text")


class RetrieveCommentsArguments(BlockArguments):
    start_cursor: str | None = _start_cursor_field()
    page_size: int | None = _page_size_field()


class SearchFilter(BaseModel):
    property: str
    value: str


class SearchSort(BaseModel):
    direction: Literal["ascending", "descending"]
    timestamp: Literal["last_edited_time"] = "last_edited_time"


class SearchArguments(FormattedArguments):
    query: str | None = Field(default=None, description="Text to search for")
    filter: SearchFilter | None = Field(default=None, description="Object type filter")
    sort: SearchSort | None = Field(default=None, description="Sort order")
    start_cursor: str | None = _start_cursor_field()
    page_size: int | None = _page_size_field()


# =============================================================================
# Descriptors
# =============================================================================


def _dump(model: BaseModel | None) -> JSONObject | None:
    return model.model_dump(exclude_none=True) if model is not None else None


def _notion_tool(
    name: str,
    description: str,
    arguments: type[FormattedArguments],
    call: Callable[[NotionClient, Any], Awaitable[Any]],
) -> ToolDescriptor:
    async def handler(ctx: ToolContext, args: Any) -> Any:
        return await call(NotionClient.from_context(ctx), args)

    return ToolDescriptor(
        name=name,
        description=description,
        arguments=arguments,
        downstream=Downstream.NOTION,
        handler=handler,
    )


NOTION_TOOLS: list[ToolDescriptor] = [
    _notion_tool(
        "notion_append_block_children",
        "Append new children blocks to a specified parent block in Notion.",
        AppendBlockChildrenArguments,
        lambda c, a: c.append_block_children(a.block_id, a.children, a.after),
    ),
    _notion_tool(
        "notion_retrieve_block",
        "Retrieve a block from Notion.",
        BlockArguments,
        lambda c, a: c.retrieve_block(a.block_id),
    ),
    _notion_tool(
        "notion_retrieve_block_children",
        "Retrieve the children of a block.",
        RetrieveBlockChildrenArguments,
        lambda c, a: c.retrieve_block_children(a.block_id, a.start_cursor, a.page_size),
    ),
    _notion_tool(
        "notion_delete_block",
        "Delete a block in Notion.",
        BlockArguments,
        lambda c, a: c.delete_block(a.block_id),
    ),
    _notion_tool(
        "notion_retrieve_page",
        "Retrieve a page from Notion.",
        PageArguments,
        lambda c, a: c.retrieve_page(a.page_id),
    ),
    _notion_tool(
        "notion_update_page_properties",
        "Update the properties of a page in Notion.",
        UpdatePagePropertiesArguments,
        lambda c, a: c.update_page_properties(a.page_id, a.properties),
    ),
    _notion_tool(
        "notion_list_all_users",
        "List all users in the Notion workspace.",
        ListAllUsersArguments,
        lambda c, a: c.list_all_users(a.start_cursor, a.page_size),
    ),
    _notion_tool(
        "notion_retrieve_user",
        "Retrieve a specific user by user_id in Notion.",
        RetrieveUserArguments,
        lambda c, a: c.retrieve_user(a.user_id),
    ),
    _notion_tool(
        "notion_retrieve_bot_user",
        "Retrieve the bot user associated with the current token in Notion.",
        RetrieveBotUserArguments,
        lambda c, a: c.retrieve_bot_user(),
    ),
    _notion_tool(
        "notion_create_database",
        "Create a database in Notion.",
        CreateDatabaseArguments,
        lambda c, a: c.create_database(_dump(a.parent), a.title, a.properties),
    ),
    _notion_tool(
        "notion_query_database",
        "Query a database in Notion.",
        QueryDatabaseArguments,
        lambda c, a: c.query_database(
            a.database_id,
            a.filter,
            [_dump(s) for s in a.sorts] if a.sorts is not None else None,
            a.start_cursor,
            a.page_size,
        ),
    ),
    _notion_tool(
        "notion_retrieve_database",
        "Retrieve a database in Notion.",
        DatabaseArguments,
        lambda c, a: c.retrieve_database(a.database_id),
    ),
    _notion_tool(
        "notion_update_database",
        "Update information about a database in Notion.",
        UpdateDatabaseArguments,
        lambda c, a: c.update_database(
            a.database_id, a.title, a.description, a.properties
        ),
    ),
    _notion_tool(
        "notion_create_database_item",
        "Create a new item (page) in a Notion database.",
        CreateDatabaseItemArguments,
        lambda c, a: c.create_database_item(a.database_id, a.properties),
    ),
    _notion_tool(
        "notion_create_comment",
        "Create a comment in Notion on a page or in an existing discussion thread.",
        CreateCommentArguments,
        lambda c, a: c.create_comment(a.rich_text, _dump(a.parent), a.discussion_id),
    ),
    _notion_tool(
        "notion_retrieve_comments",
        "Retrieve a list of unresolved comments from a Notion page or block.",
        RetrieveCommentsArguments,
        lambda c, a: c.retrieve_comments(a.block_id, a.start_cursor, a.page_size),
    ),
    _notion_tool(
        "notion_search",
        "Search pages or databases by title in Notion.",
        SearchArguments,
        lambda c, a: c.search(
            a.query, _dump(a.filter), _dump(a.sort), a.start_cursor, a.page_size
        ),
    ),
]
