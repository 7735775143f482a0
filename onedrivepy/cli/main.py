"""OneDrive CLI - Main commands."""
import asyncio
from pathlib import Path
from typing import List, Optional

import aiofiles
import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

app = typer.Typer(
    name="onedrive",
    help="OneDrive cloud storage CLI",
    add_completion=False
)
console = Console()

DEFAULT_SCOPES = ['files.readwrite', 'offline_access']
DEFAULT_REDIRECT_URI = 'http://localhost:7000/'

ClientIdOption = typer.Option(
    ..., "--client-id", envvar="ONEDRIVE_CLIENT_ID", help="Application (client) ID"
)
ClientSecretOption = typer.Option(
    ..., "--client-secret", envvar="ONEDRIVE_CLIENT_SECRET", help="Application secret"
)


# Session path: ~/.config/onedrive/session.session
def get_session_path() -> Path:
    config_dir = Path.home() / ".config" / "onedrive"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / "session"


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def make_client(client_id: str):
    from onedrivepy import OneDriveClient
    return OneDriveClient(client_id, storage=str(get_session_path()))


def require_login(client) -> None:
    if not client.is_logged_in:
        console.print("[red]Not logged in. Run 'onedrive login-url' and 'onedrive auth' first.[/red]")
        raise typer.Exit(1)


def format_size(size: Optional[int]) -> str:
    if size is None:
        return "-"
    value = float(size)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} PB"


@app.command("login-url")
def login_url(
    client_id: str = ClientIdOption,
    scopes: List[str] = typer.Option(DEFAULT_SCOPES, "--scope", "-s", help="OAuth scope (repeatable)"),
    redirect_uri: str = typer.Option(DEFAULT_REDIRECT_URI, "--redirect-uri", "-r", help="Redirect URI"),
):
    """Print the URL to visit to grant access."""
    async def do_login_url():
        async with make_client(client_id) as onedrive:
            url = onedrive.get_login_url(scopes, redirect_uri)
        console.print("Open this URL in a browser, then run 'onedrive auth CODE':")
        console.print(url, soft_wrap=True)

    run_async(do_login_url())


@app.command()
def auth(
    code: str = typer.Argument(..., help="Authorization code from the redirect URI"),
    client_id: str = ClientIdOption,
    client_secret: str = ClientSecretOption,
):
    """Exchange an authorization code for an access token."""
    from onedrivepy import OneDriveException

    async def do_auth():
        async with make_client(client_id) as onedrive:
            try:
                token = await onedrive.obtain_access_token(client_secret, code)
            except OneDriveException as e:
                console.print(f"[red]Authentication failed: {e}[/red]")
                raise typer.Exit(1)
            console.print("[green]Access token obtained[/green]")
            console.print(f"Expires in: {token.expires_in}s")
            console.print(f"Session saved to: {onedrive.session_file}")

    run_async(do_auth())


@app.command()
def renew(
    client_id: str = ClientIdOption,
    client_secret: str = ClientSecretOption,
):
    """Renew the access token with the stored refresh token."""
    from onedrivepy import OneDriveException

    async def do_renew():
        async with make_client(client_id) as onedrive:
            try:
                token = await onedrive.renew_access_token(client_secret)
            except OneDriveException as e:
                console.print(f"[red]Renewal failed: {e}[/red]")
                raise typer.Exit(1)
            console.print(f"[green]Access token renewed[/green], expires in {token.expires_in}s")

    run_async(do_renew())


@app.command()
def status(
    client_id: str = ClientIdOption,
):
    """Show the status of the stored access token."""
    from onedrivepy import AccessTokenStatus

    async def show_status():
        async with make_client(client_id) as onedrive:
            token_status = onedrive.access_token_status()
            colors = {
                AccessTokenStatus.MISSING: "red",
                AccessTokenStatus.EXPIRED: "red",
                AccessTokenStatus.EXPIRING: "yellow",
                AccessTokenStatus.VALID: "green",
            }
            color = colors[token_status]
            console.print(f"Client ID: {onedrive.client_id}")
            console.print(f"Token: [{color}]{token_status.name.lower()}[/{color}]")
            if token_status is not AccessTokenStatus.MISSING:
                console.print(f"Expires in: {int(onedrive.token_expire())}s")
            console.print(f"Session: {onedrive.session_file}")

    run_async(show_status())


@app.command()
def drive(
    client_id: str = ClientIdOption,
):
    """Show the default drive and its quota."""
    async def show_drive():
        async with make_client(client_id) as onedrive:
            require_login(onedrive)
            my_drive = await onedrive.get_my_drive()

            console.print(f"[bold]Drive:[/bold] {my_drive.name or my_drive.id}")
            console.print(f"[bold]Type:[/bold] {my_drive.drive_type}")
            if my_drive.owner and my_drive.owner.display_name:
                console.print(f"[bold]Owner:[/bold] {my_drive.owner.display_name}")
            quota = my_drive.quota
            if quota:
                console.print(
                    f"[bold]Storage:[/bold] {format_size(quota.used)} / {format_size(quota.total)} "
                    f"({quota.used_percent:.1f}% used, {format_size(quota.remaining)} free)"
                )

    run_async(show_drive())


@app.command()
def ls(
    path: str = typer.Argument("/", help="Path to list"),
    long: bool = typer.Option(False, "-l", "--long", help="Long format with details"),
    client_id: str = ClientIdOption,
):
    """List files and folders."""
    async def list_files():
        async with make_client(client_id) as onedrive:
            require_login(onedrive)
            folder = await onedrive.get_drive_item_by_path(path)
            children = await folder.children()

            if long:
                table = Table()
                table.add_column("Type", style="cyan")
                table.add_column("Size", justify="right")
                table.add_column("Modified")
                table.add_column("Name")
                table.add_column("ID", style="dim")

                for child in children:
                    modified = child.last_modified_date_time
                    table.add_row(
                        "D" if child.is_folder else "F",
                        "-" if child.is_folder else f"{child.size or 0:,}",
                        modified.strftime("%Y-%m-%d %H:%M") if modified else "",
                        child.name or "",
                        child.id,
                    )

                console.print(table)
            else:
                for child in children:
                    if child.is_folder:
                        console.print(f"[blue]{child.name}/[/blue]")
                    else:
                        console.print(child.name)

    run_async(list_files())


@app.command()
def upload(
    file_path: Path = typer.Argument(..., help="Local file to upload", exists=True, dir_okay=False),
    dest: str = typer.Option("/", "--dest", "-d", help="Destination folder path"),
    name: str = typer.Option(None, "--name", "-n", help="Custom file name"),
    range_size: int = typer.Option(None, "--range-size", help="Upload range size in bytes"),
    content_type: str = typer.Option(None, "--content-type", help="Content-Type of the file"),
    client_id: str = ClientIdOption,
):
    """Upload a file through an upload session."""
    from onedrivepy import OneDriveException
    from onedrivepy.core.upload import UploadProgress

    async def do_upload():
        async with make_client(client_id) as onedrive:
            require_login(onedrive)
            folder = await onedrive.get_drive_item_by_path(dest)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                task = progress.add_task(f"Uploading {file_path.name}", total=100)

                def on_progress(p: UploadProgress):
                    progress.update(task, completed=p.percentage)

                session = await folder.start_upload(
                    name or file_path.name,
                    file_path,
                    content_type=content_type,
                    range_size=range_size,
                    progress_callback=on_progress
                )
                result = await session.complete_with_result()
                if result.ok:
                    progress.update(task, completed=100)

            if not result.ok:
                console.print(f"[red]Upload failed ({result.error_kind.value}): {result.detail}[/red]")
                raise typer.Exit(1)

            item = result.item
            console.print(f"[green]Uploaded:[/green] {item.name}")
            console.print(f"ID: {item.id}")
            console.print(f"Size: {item.size or 0:,} bytes")

    try:
        run_async(do_upload())
    except OneDriveException as e:
        console.print(f"[red]Upload failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def download(
    remote_path: str = typer.Argument(..., help="Remote file path"),
    output: Path = typer.Option(None, "--output", "-o", help="Output file path"),
    client_id: str = ClientIdOption,
):
    """Download a file from OneDrive."""
    async def do_download():
        async with make_client(client_id) as onedrive:
            require_login(onedrive)
            item = await onedrive.get_drive_item_by_path(remote_path)

            if item.is_folder:
                console.print("[red]Cannot download a folder[/red]")
                raise typer.Exit(1)

            output_path = output or Path(item.name)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                task = progress.add_task(f"Downloading {item.name}", total=item.size)
                downloaded = 0

                async with aiofiles.open(output_path, 'wb') as f:
                    async for chunk in item.iter_download():
                        await f.write(chunk)
                        downloaded += len(chunk)
                        progress.update(task, completed=downloaded)

            console.print(f"[green]Downloaded:[/green] {output_path}")

    run_async(do_download())


@app.command()
def logout():
    """Delete the stored session."""
    session_file = get_session_path().with_suffix(".session")
    if session_file.exists():
        session_file.unlink()
        console.print("[green]Logged out successfully[/green]")
    else:
        console.print("[yellow]No active session[/yellow]")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
