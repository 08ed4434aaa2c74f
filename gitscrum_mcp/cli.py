"""Command line entry point."""

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel

from gitscrum_mcp import __version__
from gitscrum_mcp.core.device_auth import DeviceAuthClient
from gitscrum_mcp.core.exceptions import (
    DeviceAuthError,
    NetworkUnreachableError,
    TokenStorageError,
)
from gitscrum_mcp.core.token_store import TokenStore
from gitscrum_mcp.models.auth import TokenResponse

app = typer.Typer(help="GitScrum MCP server")
console = Console()
# stdout carries the MCP protocol while serving
err_console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Run the MCP server when no command is given."""
    if ctx.invoked_subcommand is None:
        serve()


@app.command()
def serve() -> None:
    """Start the MCP server on stdin/stdout."""
    from gitscrum_mcp import server

    err_console.print(f"[cyan]GitScrum MCP server {__version__}[/cyan]")
    try:
        asyncio.run(server.main())
    except KeyboardInterrupt:
        err_console.print("[yellow]Server stopped[/yellow]")


async def _device_login(device_auth: DeviceAuthClient) -> TokenResponse:
    device_code = await device_auth.request_device_code()

    console.print(
        Panel(
            f"Open [bold]{device_code.verification_url}[/bold]\n"
            f"and confirm the code [bold green]{device_code.user_code}[/bold green]",
            title="GitScrum login",
        )
    )
    console.print(
        f"Waiting for authorization (expires in {round(device_code.expires_in / 60)} minutes)..."
    )
    return await device_auth.wait_for_token(device_code)


@app.command()
def auth(
    api_url: str = typer.Option(None, help="API base URL (overrides GITSCRUM_API_URL)"),
    force: bool = typer.Option(False, help="Log in again even when a token exists"),
) -> None:
    """
    Log in with the device flow and save the token.

    The saved token is used by the MCP server on its next start.
    """
    token_store = TokenStore()

    if token_store.has_token() and not force:
        console.print(
            f"[green]Already authenticated[/green] ({token_store.token_source()})"
        )
        return

    try:
        token = asyncio.run(_device_login(DeviceAuthClient(api_url=api_url)))
        token_store.save_token(token.access_token)
    except (DeviceAuthError, NetworkUnreachableError, TokenStorageError) as e:
        console.print(f"[red]Login failed:[/red] {e.message}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("[yellow]Login cancelled[/yellow]")
        raise typer.Exit(130)

    console.print("[green]Authenticated.[/green]")
    console.print(f"Token saved to {token_store.token_file}")
    console.print(token.access_token, highlight=False)


@app.command()
def version() -> None:
    """Show the version."""
    console.print(f"gitscrum-mcp {__version__}")


if __name__ == "__main__":
    app()
