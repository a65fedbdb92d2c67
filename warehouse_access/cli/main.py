"""
Warehouse Access - Administrative CLI
======================================

Command-line interface over the credential store, the RBAC engine and
the activity log of the warehouse management system.

Features:
- Registration of the first administrator
- User management (create, rename, change password or role, delete)
- Login check showing the parts of the system a user may reach
- Permission table and access decision testing
- Activity log browsing

Built with Typer and Rich.
"""

from datetime import datetime

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.tree import Tree
from rich import box

from ..exceptions import CredentialStoreError
from ..models.database import (
    USERS_FILE_PATH,
    DATABASE_URL,
    create_db_engine,
    create_session_factory,
    get_session,
    init_db,
    reset_db
)
from ..models.entities import LogLevel, Permission, Role, User

# Initialize CLI app and console
app = typer.Typer(
    name="warehouse-access",
    help="Warehouse system - users, roles and activity log",
    add_completion=False
)

console = Console()

# Sub-commands
users_app = typer.Typer(help="Manage users")
roles_app = typer.Typer(help="Show roles and permissions")
logs_app = typer.Typer(help="View the activity log")
test_app = typer.Typer(help="Test access decisions")

app.add_typer(users_app, name="users")
app.add_typer(roles_app, name="roles")
app.add_typer(logs_app, name="logs")
app.add_typer(test_app, name="test")


class Settings:
    """Locations of the users file and activity database for one invocation."""

    def __init__(self, users_file: str = USERS_FILE_PATH, database_url: str = DATABASE_URL):
        self.users_file = users_file
        self.database_url = database_url
        self._session_factory = None

    @property
    def session_factory(self):
        if self._session_factory is None:
            engine = init_db(create_db_engine(self.database_url))
            self._session_factory = create_session_factory(engine)
        return self._session_factory

    def access_control(self):
        """Access control wired to these locations."""
        from ..core.access_control import WarehouseAccessControl
        return WarehouseAccessControl(self.session_factory, users_file=self.users_file)


def get_settings(ctx: typer.Context) -> Settings:
    """Settings of the current invocation (defaults if the callback did not run)."""
    root = ctx.find_root()
    if root.obj is None:
        root.obj = Settings()
    return root.obj


def fail(message: str):
    """Print an error and stop with exit code 1."""
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(code=1)


def parse_role(name: str) -> Role:
    try:
        return Role.parse(name)
    except KeyError:
        fail(f"Unknown role '{name}'. Available: {', '.join(r.name for r in Role)}")


def parse_permission(name: str) -> Permission:
    for permission in Permission:
        if permission.value.lower() == name.strip().lower():
            return permission
    fail(f"Unknown permission '{name}'. Available: {', '.join(p.value for p in Permission)}")


def print_banner():
    """Display application banner."""
    banner = """
    ╔═══════════════════════════════════════════════════════════╗
    ║           LOGISTICS WAREHOUSE MANAGEMENT SYSTEM           ║
    ║                                                           ║
    ║        Users, Roles and Role-Based Access Control         ║
    ╚═══════════════════════════════════════════════════════════╝
    """
    console.print(Panel(banner, style="bold blue"))


# ============================================================================
# Setup Commands
# ============================================================================

@app.command()
def init(ctx: typer.Context):
    """Create the users file and the activity log database."""
    settings = get_settings(ctx)
    settings.access_control()
    console.print(f"[green]Users file ready: {settings.users_file}[/green]")
    console.print("[green]Activity log initialized successfully![/green]")


@app.command("setup-admin")
def setup_admin(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="Administrator's username"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True,
                                 help="Administrator's password")
):
    """Register the first administrator of an empty system."""
    access = get_settings(ctx).access_control()
    try:
        user = access.store.create_first_administrator(username, password)
    except CredentialStoreError as e:
        fail(str(e))
    console.print(f"[green]Created first administrator: {user.username}[/green]")


@app.command()
def demo(ctx: typer.Context):
    """Register one demo account per role."""
    from ..scenarios import load_demo_data, DEMO_PASSWORD

    access = get_settings(ctx).access_control()
    try:
        created = load_demo_data(access.store)
    except CredentialStoreError as e:
        fail(str(e))

    console.print(f"[green]Demo data loaded: {len(created)} new account(s)[/green]")
    console.print(f"All demo accounts use the password [cyan]{DEMO_PASSWORD}[/cyan]")
    console.print("\nTry these commands to explore:")
    console.print("  [cyan]python main.py users list[/cyan]")
    console.print("  [cyan]python main.py roles list[/cyan]")
    console.print("  [cyan]python main.py test access --user worker --permission DoTasks[/cyan]")


@app.command()
def login(
    ctx: typer.Context,
    username: str = typer.Option(..., "--user", "-u", help="Username"),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Password")
):
    """Log in and show the parts of the system the user may reach."""
    access = get_settings(ctx).access_control()
    try:
        if access.needs_first_administrator():
            fail("No user has been created on the system yet. Run 'setup-admin' first.")
        user = access.login(username, password)
    except CredentialStoreError as e:
        fail(str(e))

    if user is None:
        fail("Incorrect username or password")

    options = {
        Permission.BrowseWarehouse: "Warehouse",
        Permission.AssignTask: "Assign task",
        Permission.DoTasks: "Do tasks",
        Permission.ManageShipments: "Manage shipments",
        Permission.BrowseShipments: "Browse shipments",
        Permission.ManageUsers: "Manage users",
        Permission.ViewLogs: "View logs",
    }

    tree = Tree(f"[bold]Logged in as [cyan]{user.username}[/cyan] ({user.role.name})[/bold]")
    for option in access.rbac.allowed_options(user, options):
        tree.add(f"[green]✓[/green] {option}")
    console.print(tree)


# ============================================================================
# User Commands
# ============================================================================

@users_app.command("list")
def list_users(ctx: typer.Context):
    """List all users in the system."""
    access = get_settings(ctx).access_control()
    try:
        users = access.store.get_all_users()
    except CredentialStoreError as e:
        fail(str(e))

    table = Table(title="System Users", box=box.ROUNDED)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Username", style="green")
    table.add_column("Role")

    for number, user in enumerate(users, 1):
        table.add_row(str(number), user.username, user.role.name)

    console.print(table)


@users_app.command("create")
def create_user(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="Username"),
    role: str = typer.Option(..., "--role", "-r", help="Role name"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True,
                                 help="Password")
):
    """Create a new user."""
    access = get_settings(ctx).access_control()
    try:
        user = User(username, parse_role(role))
        access.store.save_new_user(user.username, password, user.role)
    except CredentialStoreError as e:
        fail(str(e))
    console.print(f"[green]Created user: {user.username} ({user.role.name})[/green]")


@users_app.command("delete")
def delete_user(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="User to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation")
):
    """Delete a user."""
    if not yes and not typer.confirm(f"Delete user '{username}'?"):
        raise typer.Abort()

    access = get_settings(ctx).access_control()
    try:
        access.store.delete_user(username)
    except CredentialStoreError as e:
        fail(str(e))
    console.print(f"[yellow]Deleted user: {username}[/yellow]")


@users_app.command("rename")
def rename_user(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="Current username"),
    new_username: str = typer.Argument(..., help="New username")
):
    """Change a user's name."""
    access = get_settings(ctx).access_control()
    try:
        access.store.change_username(username, new_username)
    except CredentialStoreError as e:
        fail(str(e))
    console.print(f"[green]Renamed {username} to {new_username}[/green]")


@users_app.command("passwd")
def change_password(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="Username"),
    password: str = typer.Option(..., prompt="New password", hide_input=True,
                                 confirmation_prompt=True, help="New password")
):
    """Change a user's password."""
    access = get_settings(ctx).access_control()
    try:
        access.store.change_user_password(username, password)
    except CredentialStoreError as e:
        fail(str(e))
    console.print(f"[green]Password changed for {username}[/green]")


@users_app.command("role")
def change_role(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="Username"),
    role: str = typer.Option(..., "--role", "-r", help="New role name")
):
    """Change a user's role."""
    new_role = parse_role(role)
    access = get_settings(ctx).access_control()
    try:
        access.store.change_user_role(username, new_role)
    except CredentialStoreError as e:
        fail(str(e))
    console.print(f"[green]{username} is now a {new_role.name}[/green]")


# ============================================================================
# Role Commands
# ============================================================================

@roles_app.command("list")
def list_roles(ctx: typer.Context):
    """List all roles and their permissions."""
    from ..core.rbac_engine import RBACEngine

    rbac = RBACEngine()
    for role in Role:
        tree = Tree(f"[bold cyan]{role.name}[/bold cyan]")
        permissions = [p for p in Permission if p in rbac.get_permissions(role)]
        if permissions:
            perms_branch = tree.add("[green]Permissions[/green]")
            for permission in permissions:
                perms_branch.add(permission.value)
        else:
            tree.add("[yellow]No permissions[/yellow]")

        console.print(tree)
        console.print()


# ============================================================================
# Test Commands
# ============================================================================

@test_app.command("access")
def test_access(
    ctx: typer.Context,
    username: str = typer.Option(..., "--user", "-u", help="Username"),
    permission: str = typer.Option(..., "--permission", "-p", help="Permission to test")
):
    """Test an access decision."""
    wanted = parse_permission(permission)
    access = get_settings(ctx).access_control()
    try:
        user = next((u for u in access.store.get_all_users() if u.username == username), None)
    except CredentialStoreError as e:
        fail(str(e))

    if user is None:
        fail(f"User '{username}' not found")

    granted, reason = access.check_access(user, wanted)
    headline = "[bold green]ACCESS GRANTED[/bold green]" if granted else "[bold red]ACCESS DENIED[/bold red]"
    console.print(Panel(
        f"{headline}\n\n"
        f"User: {user.username}\n"
        f"Role: {user.role.name}\n"
        f"Permission: {wanted.value}\n\n"
        f"Reason: {reason}",
        title="Access Decision",
        box=box.DOUBLE
    ))


@test_app.command("scenario")
def run_scenario(
    ctx: typer.Context,
    scenario_name: str = typer.Argument("all", help="Scenario to run: permissions, login, all")
):
    """Run predefined test scenarios against the demo accounts."""
    from ..scenarios import run_scenarios

    _, failed = run_scenarios(get_settings(ctx).access_control(), scenario_name)
    if failed:
        raise typer.Exit(code=1)


# ============================================================================
# Activity Log Commands
# ============================================================================

def _print_logs(logs, empty_message: str):
    if not logs:
        console.print(f"[yellow]{empty_message}[/yellow]")
        return

    table = Table(title="Activity Log", box=box.ROUNDED)
    table.add_column("Time", style="dim")
    table.add_column("Level")
    table.add_column("Message")

    level_styles = {LogLevel.INFO: "green", LogLevel.WARNING: "yellow", LogLevel.ERROR: "red"}
    for log in logs:
        style = level_styles.get(log.level, "white")
        table.add_row(
            log.timestamp.strftime("%Y-%m-%d %H:%M:%S") if log.timestamp else "-",
            f"[{style}]{log.level.value}[/{style}]",
            log.message
        )

    console.print(table)


@logs_app.command("all")
def all_logs(ctx: typer.Context):
    """Show the whole activity log."""
    from ..core.audit import ActivityLogger, NO_LOGS_FOUND

    with get_session(get_settings(ctx).session_factory) as session:
        _print_logs(ActivityLogger(session).get_all_logs(), NO_LOGS_FOUND)


@logs_app.command("date")
def logs_from_date(
    ctx: typer.Context,
    day: datetime = typer.Argument(..., formats=["%Y-%m-%d"], help="Day to show (YYYY-MM-DD)")
):
    """Show the activity log of a single day."""
    from ..core.audit import ActivityLogger, NO_RELEVANT_LOGS_FOUND

    with get_session(get_settings(ctx).session_factory) as session:
        _print_logs(ActivityLogger(session).get_logs_from_date(day.date()), NO_RELEVANT_LOGS_FOUND)


@logs_app.command("clear")
def clear_logs(ctx: typer.Context):
    """Clear the activity log (WARNING: destroys all entries)."""
    if typer.confirm("This will delete all activity log entries. Are you sure?"):
        reset_db(create_db_engine(get_settings(ctx).database_url))
        console.print("[yellow]Activity log cleared.[/yellow]")


# ============================================================================
# Main Entry Point
# ============================================================================

@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    users_file: str = typer.Option(USERS_FILE_PATH, "--users-file", help="Location of the users file"),
    database_url: str = typer.Option(DATABASE_URL, "--database-url", help="Activity log database URL")
):
    """
    Warehouse Access - users, roles and activity log

    Manages the accounts of the logistics warehouse system and decides
    which parts of the system each role may reach.
    """
    ctx.obj = Settings(users_file=users_file, database_url=database_url)

    if ctx.invoked_subcommand is None:
        print_banner()
        console.print("\nUse [cyan]--help[/cyan] to see available commands.\n")
        console.print("Quick Start:")
        console.print("  1. [cyan]python main.py init[/cyan]                  - Create the data files")
        console.print("  2. [cyan]python main.py setup-admin -u Admin[/cyan]  - Register the first administrator")
        console.print("  3. [cyan]python main.py login -u Admin[/cyan]        - Log in")
        console.print("  4. [cyan]python main.py users list[/cyan]            - View users")
        console.print()


if __name__ == "__main__":
    app()
