"""Server-rendered sign-in form for the authorization endpoint."""

import html as html_mod

from pydantic import BaseModel

FORM_STYLE = """
    * { box-sizing: border-box; margin: 0; padding: 0; }
    body { font-family: system-ui, sans-serif; background: #f5f5f5;
        display: flex; align-items: center; justify-content: center;
        min-height: 100vh; }
    .card { background: #fff; border: 1px solid #e5e7eb; border-radius: 8px;
        padding: 2rem; width: 100%; max-width: 380px; }
    h1 { font-size: 1.25rem; font-weight: 600; margin-bottom: 0.5rem; }
    p { color: #6b7280; font-size: 0.875rem; margin-bottom: 1.5rem; }
    label { display: block; font-size: 0.875rem; font-weight: 500;
        margin-bottom: 0.25rem; }
    input { width: 100%; border: 1px solid #d1d5db; border-radius: 6px;
        padding: 0.5rem 0.75rem; font-size: 0.875rem; margin-bottom: 1rem; }
    button { width: 100%; background: #2563eb; color: #fff; border: none;
        border-radius: 6px; padding: 0.625rem; font-size: 0.875rem;
        font-weight: 500; cursor: pointer; }
    button:hover { background: #1d4ed8; }
    .error { background: #fef2f2; border: 1px solid #fecaca; color: #dc2626;
        padding: 0.5rem 0.75rem; border-radius: 6px; font-size: 0.875rem;
        margin-bottom: 1rem; }
"""


class LoginFormState(BaseModel):
    """OAuth parameters carried through the form as hidden fields."""

    client_id: str = ""
    redirect_uri: str = ""
    code_challenge: str = ""
    code_challenge_method: str = "S256"
    state: str = ""
    username: str = ""
    agent_label: str = ""


def _hidden(name: str, value: str) -> str:
    return (
        f'<input type="hidden" name="{name}" '
        f'value="{html_mod.escape(value, quote=True)}">'
    )


def render_login_page(form: LoginFormState, error: str | None = None) -> str:
    """Render the sign-in page; ``error`` adds an inline message."""
    error_html = (
        f'<div class="error">{html_mod.escape(error)}</div>' if error else ""
    )
    hidden = "\n      ".join(
        [
            _hidden("client_id", form.client_id),
            _hidden("redirect_uri", form.redirect_uri),
            _hidden("response_type", "code"),
            _hidden("code_challenge", form.code_challenge),
            _hidden("code_challenge_method", form.code_challenge_method or "S256"),
            _hidden("state", form.state),
        ]
    )
    username = html_mod.escape(form.username, quote=True)
    agent_label = html_mod.escape(form.agent_label, quote=True)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Cerebro - Connect</title>
  <style>{FORM_STYLE}</style>
</head>
<body>
  <div class="card">
    <h1>Connect to Cerebro</h1>
    <p>Sign in to authorize your agent.</p>
    {error_html}
    <form method="POST" action="/oauth/authorize">
      {hidden}
      <label for="username">Username</label>
      <input id="username" name="username" type="text" value="{username}"
        autocomplete="username" required>
      <label for="password">Password</label>
      <input id="password" name="password" type="password"
        autocomplete="current-password" required>
      <label for="agent_label">Connection name (optional)</label>
      <input id="agent_label" name="agent_label" type="text"
        placeholder="e.g. Work agent" value="{agent_label}">
      <button type="submit">Authorize</button>
    </form>
  </div>
</body>
</html>"""
