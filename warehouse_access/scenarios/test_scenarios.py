"""
Test Scenarios for Access Control Demonstration
================================================

Scripted checks run against the demo accounts (see demo_data.py).

Scenarios:
1. Permissions - every role against the parts of the system it may reach
2. Login - correct and wrong passwords, unknown users
"""

from typing import List, Tuple

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from ..core.access_control import WarehouseAccessControl
from ..models.entities import Permission
from .demo_data import DEMO_PASSWORD

console = Console()


def run_scenarios(access: WarehouseAccessControl, scenario_name: str = "all") -> Tuple[int, int]:
    """
    Run access control test scenarios.

    Args:
        access: Access control wired to the store holding the demo accounts
        scenario_name: Which scenario to run (permissions, login, all)

    Returns:
        Tuple of (passed, failed) over the scenarios that ran; an unknown
        scenario name counts as one failure
    """
    scenarios = {
        'permissions': run_permission_scenario,
        'login': run_login_scenario
    }

    console.print(Panel(
        "[bold]Warehouse Access Test Scenarios[/bold]\n\n"
        "These scenarios log in with the demo accounts and check which\n"
        "parts of the warehouse system each role can reach.",
        title="Test Suite",
        box=box.DOUBLE
    ))

    passed = failed = 0
    if scenario_name == "all":
        for name, func in scenarios.items():
            console.print(f"\n[bold cyan]{'='*60}[/bold cyan]")
            p, f = func(access)
            passed += p
            failed += f
    elif scenario_name in scenarios:
        passed, failed = scenarios[scenario_name](access)
    else:
        console.print(f"[red]Unknown scenario: {scenario_name}[/red]")
        console.print(f"Available: {', '.join(scenarios.keys())}, all")
        failed = 1

    return passed, failed


def run_permission_scenario(access: WarehouseAccessControl) -> Tuple[int, int]:
    """
    Scenario: Role Permissions

    Each demo account logs in and requests parts of the system it should
    and should not reach.
    """
    console.print(Panel(
        "[bold]Scenario: Role Permissions[/bold]\n\n"
        "Administrators manage users and read logs, logisticians manage shipments,\n"
        "managers assign tasks and warehousemen do them.",
        title="Permissions Scenario",
        box=box.ROUNDED
    ))

    test_cases = [
        # (username, permission, expected)
        ("admin", Permission.ManageUsers, True),
        ("admin", Permission.ViewLogs, True),
        ("admin", Permission.AssignTask, False),
        ("manager", Permission.AssignTask, True),
        ("manager", Permission.BrowseWarehouse, True),
        ("manager", Permission.ManageUsers, False),
        ("logistician", Permission.ManageShipments, True),
        ("logistician", Permission.BrowseWarehouse, False),
        ("worker", Permission.DoTasks, True),
        ("worker", Permission.BrowseShipments, True),
        ("worker", Permission.ManageShipments, False),
    ]

    return _run_test_cases(access, test_cases, "Role Permission Tests")


def run_login_scenario(access: WarehouseAccessControl) -> Tuple[int, int]:
    """
    Scenario: Login

    Verifies that only the right password opens an account and that a
    failed login is a normal outcome rather than an error.
    """
    console.print(Panel(
        "[bold]Scenario: Login[/bold]\n\n"
        "Correct passwords return the account's role, anything else is refused.",
        title="Login Scenario",
        box=box.ROUNDED
    ))

    test_cases = [
        # (username, password, expected_success)
        ("admin", DEMO_PASSWORD, True),
        ("admin", DEMO_PASSWORD + "x", False),
        ("worker", DEMO_PASSWORD, True),
        ("Worker", DEMO_PASSWORD, False),
        ("nobody", DEMO_PASSWORD, False),
    ]

    table = Table(title="Login Tests", box=box.ROUNDED)
    table.add_column("User", style="cyan")
    table.add_column("Password")
    table.add_column("Expected")
    table.add_column("Actual")
    table.add_column("Result")

    passed = 0
    failed = 0

    for username, password, expected in test_cases:
        user = access.login(username, password)
        actual = user is not None

        if actual == expected:
            result = "[green]PASS[/green]"
            passed += 1
        else:
            result = "[red]FAIL[/red]"
            failed += 1

        table.add_row(
            username,
            "correct" if password == DEMO_PASSWORD else "wrong",
            "[green]OK[/green]" if expected else "[red]REFUSED[/red]",
            f"[green]{user.role.name}[/green]" if actual else "[red]REFUSED[/red]",
            result
        )

    console.print(table)
    console.print(f"\nResults: [green]{passed} passed[/green], [red]{failed} failed[/red]")
    return passed, failed


def _run_test_cases(
    access: WarehouseAccessControl,
    test_cases: List[Tuple[str, Permission, bool]],
    title: str
) -> Tuple[int, int]:
    """
    Execute permission test cases and display results.

    Args:
        access: Access control to test
        test_cases: List of (username, permission, expected_permit) tuples
        title: Title for the results table
    """
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("User", style="cyan")
    table.add_column("Permission")
    table.add_column("Expected")
    table.add_column("Actual")
    table.add_column("Result")
    table.add_column("Reason")

    passed = 0
    failed = 0

    for username, permission, expected in test_cases:
        user = access.login(username, DEMO_PASSWORD)
        if user is None:
            table.add_row(
                username, str(permission),
                "?", "?", "[yellow]SKIP[/yellow]", "Login failed"
            )
            continue

        actual, reason = access.check_access(user, permission)
        expected_str = "[green]PERMIT[/green]" if expected else "[red]DENY[/red]"
        actual_str = "[green]PERMIT[/green]" if actual else "[red]DENY[/red]"

        if actual == expected:
            result = "[green]PASS[/green]"
            passed += 1
        else:
            result = "[red]FAIL[/red]"
            failed += 1

        table.add_row(
            username,
            str(permission),
            expected_str,
            actual_str,
            result,
            reason[:35] + "..." if len(reason) > 35 else reason
        )

    console.print(table)
    console.print(f"\nResults: [green]{passed} passed[/green], [red]{failed} failed[/red]")
    return passed, failed
