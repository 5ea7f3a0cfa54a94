"""Markdown rendering of Notion API responses."""

from typing import Any

from improvado_gateway.tools.base import dump_json


def _plain_text(rich_text: Any) -> str:
    if not isinstance(rich_text, list):
        return ""
    return "".join(
        item.get("plain_text") or (item.get("text") or {}).get("content", "")
        for item in rich_text
        if isinstance(item, dict)
    )


def _page_title(page: dict[str, Any]) -> str:
    for prop in (page.get("properties") or {}).values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            return _plain_text(prop.get("title")) or "Untitled"
    return "Untitled"


def _property_value(prop: dict[str, Any]) -> str:
    kind = prop.get("type")
    value = prop.get(kind) if kind else None
    if kind in ("title", "rich_text"):
        return _plain_text(value)
    if kind in ("select", "status") and isinstance(value, dict):
        return str(value.get("name", ""))
    if kind == "multi_select" and isinstance(value, list):
        return ", ".join(str(v.get("name", "")) for v in value if isinstance(v, dict))
    if kind == "date" and isinstance(value, dict):
        end = value.get("end")
        return f"{value.get('start')} → {end}" if end else str(value.get("start", ""))
    if kind == "people" and isinstance(value, list):
        return ", ".join(str(p.get("name") or p.get("id", "")) for p in value)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return dump_json(value).replace("\n", " ")
    return str(value)


def _block(block: dict[str, Any]) -> str:
    kind = block.get("type", "")
    data = block.get(kind, {}) if isinstance(block.get(kind), dict) else {}
    text = _plain_text(data.get("rich_text"))
    if kind == "heading_1":
        return f"# {text}"
    if kind == "heading_2":
        return f"## {text}"
    if kind == "heading_3":
        return f"### {text}"
    if kind == "bulleted_list_item":
        return f"- {text}"
    if kind == "numbered_list_item":
        return f"1. {text}"
    if kind == "to_do":
        mark = "x" if data.get("checked") else " "
        return f"- [{mark}] {text}"
    if kind == "quote":
        return f"> {text}"
    if kind == "code":
        return f"```{data.get('language', '')}\n{text}\n```"
    if kind == "divider":
        return "---"
    if kind == "child_page":
        return f"**Page:** {data.get('title', '')}"
    if kind == "child_database":
        return f"**Database:** {data.get('title', '')}"
    return text


def _page(page: dict[str, Any]) -> str:
    lines = [f"# {_page_title(page)}", ""]
    if page.get("url"):
        lines.append(f"URL: {page['url']}")
    lines.append(f"ID: {page.get('id', '')}")
    lines.append("")
    props = page.get("properties") or {}
    if props:
        lines.append("## Properties")
        lines.append("")
        for name, prop in props.items():
            if isinstance(prop, dict) and prop.get("type") != "title":
                lines.append(f"- **{name}**: {_property_value(prop)}")
    return "\n".join(lines).rstrip()


def _database(db: dict[str, Any]) -> str:
    title = _plain_text(db.get("title")) or "Untitled database"
    lines = [f"# {title}", "", f"ID: {db.get('id', '')}", ""]
    description = _plain_text(db.get("description"))
    if description:
        lines.extend([description, ""])
    props = db.get("properties") or {}
    if props:
        lines.append("## Schema")
        lines.append("")
        for name, prop in props.items():
            kind = prop.get("type", "") if isinstance(prop, dict) else ""
            lines.append(f"- **{name}** ({kind})")
    return "\n".join(lines).rstrip()


def _user(user: dict[str, Any]) -> str:
    name = user.get("name") or "Unnamed user"
    kind = user.get("type", "user")
    email = (user.get("person") or {}).get("email") if kind == "person" else None
    suffix = f" <{email}>" if email else ""
    return f"- **{name}**{suffix} ({kind}, `{user.get('id', '')}`)"


def _comment(comment: dict[str, Any]) -> str:
    author = (comment.get("created_by") or {}).get("id", "unknown")
    created = comment.get("created_time", "")
    return f"- {_plain_text(comment.get('rich_text'))} _(by {author} at {created})_"


def _single(item: dict[str, Any]) -> str:
    kind = item.get("object")
    if kind == "page":
        return _page(item)
    if kind == "database":
        return _database(item)
    if kind == "block":
        return _block(item)
    if kind == "user":
        return _user(item)
    if kind == "comment":
        return _comment(item)
    return f"```json\n{dump_json(item)}\n```"


def _list(response: dict[str, Any]) -> str:
    results = [r for r in response.get("results") or [] if isinstance(r, dict)]
    lines: list[str] = []
    for item in results:
        kind = item.get("object")
        if kind == "page":
            lines.append(f"- [{_page_title(item)}]({item.get('url', '')}) `{item.get('id', '')}`")
        elif kind == "database":
            title = _plain_text(item.get("title")) or "Untitled database"
            lines.append(f"- **{title}** (database) `{item.get('id', '')}`")
        else:
            lines.append(_single(item))
    if not lines:
        lines.append("_No results._")
    if response.get("has_more"):
        lines.extend(["", f"More results available. Next cursor: `{response.get('next_cursor')}`"])
    return "\n".join(lines)


def to_markdown(response: Any) -> str:
    """Render a decoded API response as Markdown."""
    if isinstance(response, dict):
        if response.get("object") == "list":
            return _list(response)
        return _single(response)
    return f"```json\n{dump_json(response)}\n```"
