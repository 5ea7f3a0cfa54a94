"""HTML pages for the consent flow."""

from html import escape

from improvado_gateway import __version__
from improvado_gateway.core.constants import (
    FORM_ACTION_FIELD,
    FORM_API_KEY_FIELD,
    FORM_REQUEST_FIELD,
)


def layout(content: str, title: str) -> str:
    """Wrap page content in the shared document shell."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>
        body {{ font-family: system-ui, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px; color: #0f172a; }}
        h1 {{ font-size: 1.6rem; }}
        .card {{ background: #f8fafc; padding: 16px; border-radius: 8px; margin: 16px 0; }}
        .error {{ background: #fef2f2; color: #b91c1c; padding: 12px 16px; border-radius: 8px; margin: 16px 0; }}
        .warning {{ background: #fffbeb; color: #92400e; padding: 12px 16px; border-radius: 8px; margin: 16px 0; }}
        .success {{ color: #16a34a; font-size: 48px; text-align: center; }}
        input[type=password] {{ width: 100%; padding: 8px; box-sizing: border-box; }}
        button {{ padding: 10px 18px; border-radius: 6px; border: none; cursor: pointer; }}
        button.approve {{ background: #2563eb; color: white; }}
        button.reject {{ background: #e2e8f0; }}
        a {{ color: #2563eb; }}
    </style>
</head>
<body>
{content}
<footer style="margin-top: 40px; color: #94a3b8; font-size: 0.8rem;">Improvado MCP gateway {__version__}</footer>
</body>
</html>"""


def home_content() -> str:
    return """<h1>Improvado MCP</h1>
<div class="card">
    <p>This server connects AI assistants to your Improvado data and Notion workspace.</p>
    <p>Add it to your MCP client and sign in with your Improvado API key when prompted.</p>
</div>
<p><a href="/tools">Available tools</a> &middot; <a href="/health">Health</a></p>"""


def render_authorize_screen(
    scopes: list[dict[str, str]],
    pending_token: str,
    error_message: str | None = None,
    retryable: bool = False,
) -> str:
    """Render the consent form carrying ``pending_token`` unchanged."""
    scope_items = "\n".join(
        f"        <li><strong>{escape(s['name'])}</strong>: {escape(s['description'])}</li>"
        for s in scopes
    )
    notice = ""
    if error_message:
        css_class = "warning" if retryable else "error"
        notice = f'<div class="{css_class}">{escape(error_message)}</div>'

    return f"""<h1>Authorize access</h1>
{notice}
<div class="card">
    <p>An application is requesting access to:</p>
    <ul>
{scope_items}
    </ul>
</div>
<form method="post" action="/approve">
    <input type="hidden" name="{FORM_REQUEST_FIELD}" value="{escape(pending_token, quote=True)}">
    <p>
        <label for="{FORM_API_KEY_FIELD}">Improvado API key</label>
        <input type="password" id="{FORM_API_KEY_FIELD}" name="{FORM_API_KEY_FIELD}" autocomplete="off">
    </p>
    <button class="approve" type="submit" name="{FORM_ACTION_FIELD}" value="approve">Approve</button>
    <button class="reject" type="submit" name="{FORM_ACTION_FIELD}" value="reject">Reject</button>
</form>"""


def render_authorization_rejected(return_to: str) -> str:
    return f"""<h1>Authorization rejected</h1>
<div class="card"><p>You declined the request. No access was granted.</p></div>
<p><a href="{escape(return_to, quote=True)}">Return home</a></p>"""


def render_authorization_approved(redirect_to: str) -> str:
    target = escape(redirect_to, quote=True)
    return f"""<div class="success">&#10003;</div>
<h1>Authorization approved</h1>
<div class="card"><p>You will be redirected back to your application.</p></div>
<p><a href="{target}">Continue</a></p>
<meta http-equiv="refresh" content="2;url={target}">"""
