"""Employee and project reference data commands."""

from typing import Optional

import click

from timekeeping.cli.context import build_context, is_debug
from timekeeping.cli.error_handlers import with_error_handling
from timekeeping.cli.utils.formatters import format_info, format_success, format_table


@click.group(name="employee")
def employee():
    """Register and list employees."""


@employee.command(name="add")
@click.option("--name", "full_name", type=str, required=True, help="Full name")
@click.option(
    "--user-id", type=str, default=None, help="Authenticated user id to link"
)
def add_employee(full_name: str, user_id: Optional[str]):
    """Register an employee."""
    with with_error_handling(is_debug()):
        app = build_context()
        created = app.directory.register(full_name, user_id=user_id)
        click.echo(format_success(f"Registered {created.full_name} (id {created.id})"))


@employee.command(name="list")
def list_employees():
    """List employees ordered by name."""
    with with_error_handling(is_debug()):
        app = build_context()
        employees = app.directory.list_employees()
        if not employees:
            click.echo(format_info("No employees registered."))
            return

        rows = [[e.id, e.full_name, e.user_id or "-", e.status] for e in employees]
        click.echo(format_table(["ID", "Name", "User", "Status"], rows))


@click.group(name="project")
def project():
    """Manage the projects time can be booked on."""


@project.command(name="add")
@click.option("--name", type=str, required=True, help="Project name")
def add_project(name: str):
    """Add an active project."""
    with with_error_handling(is_debug()):
        app = build_context()
        created = app.projects.add_project(name)
        click.echo(format_success(f"Added project {created.name} (id {created.id})"))


@project.command(name="list")
@click.option("--all", "show_all", is_flag=True, help="Include archived projects")
def list_projects(show_all: bool):
    """List projects ordered by name."""
    with with_error_handling(is_debug()):
        app = build_context()
        projects = app.projects.list_projects(active_only=not show_all)
        if not projects:
            click.echo(format_info("No projects found."))
            return

        rows = [[p.id, p.name, p.status] for p in projects]
        click.echo(format_table(["ID", "Name", "Status"], rows))


@project.command(name="archive")
@click.argument("project_id")
def archive_project(project_id: str):
    """Archive a project so it is no longer offered for booking."""
    with with_error_handling(is_debug()):
        app = build_context()
        archived = app.projects.archive_project(project_id)
        click.echo(format_success(f"Archived project {archived.name}"))
