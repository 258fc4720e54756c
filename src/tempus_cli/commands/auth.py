"""Authentication commands.

Tokens are issued by the hosted identity provider; these commands only store,
show and forget them.
"""

import typer
from rich.prompt import Prompt

from tempus_cli.exceptions import ValidationError
from tempus_cli.services.auth_service import AuthService
from tempus_cli.services.session import get_identity
from tempus_cli.utils.typer_helpers import SuggestingGroup
from tempus_cli.utils.ui.console import get_console
from tempus_cli.utils.ui.formatters import format_output, format_success, format_warning

from .decorators import command_wrapper
from .utils import resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Authentication commands")
console = get_console()


@app.command()
@command_wrapper(auth_required=False)
def login(
    token: str | None = typer.Option(None, "--token", help="Access token from the identity provider"),
    email: str | None = typer.Option(None, "--email", help="Email of the signed-in user"),
    user_id: str | None = typer.Option(None, "--user-id", help="User id of the signed-in user"),
) -> None:
    """Store an access token for subsequent commands."""
    if not token:
        token = Prompt.ask("Access token", password=True)
    if not token or not token.strip():
        raise ValidationError("An access token is required")

    user = AuthService().login(token.strip(), user_id=user_id, email=email)
    format_success(f"Logged in as {user.email or user.user_id or 'unknown user'}")


@app.command()
@command_wrapper(auth_required=False)
def logout() -> None:
    """Forget the stored access token."""
    service = AuthService()
    if not service.is_authenticated():
        format_warning("Not logged in")
        return
    service.logout()
    format_success("Logged out")


@app.command()
@command_wrapper
def whoami(
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show the signed-in user."""
    user = get_identity().get_current_user()
    data = user.model_dump() if user else {}
    output = resolve_output(output)
    if output == "pretty":
        console.print(f"[bold]Email:[/bold] {data.get('email') or '-'}")
        console.print(f"[bold]User id:[/bold] {data.get('user_id') or '-'}")
        return
    format_output(data, output)
