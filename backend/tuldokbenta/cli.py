# Overview: Flask CLI command groups for bootstrap, operator accounts, and sales helpers.

# backend/tuldokbenta/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to "tuldokbenta:create_app".
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create all tables (idempotent). Prefer "flask db upgrade" once migrations are in use.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Operator accounts:
# - python -m flask operators create --username counter --password "Password123"
#   Create an operator login (prompts if options are omitted).
# - python -m flask operators list
#   List operators with active status and last login.
# - python -m flask operators deactivate counter
#   Block an operator from logging in.
#
# Sales:
# - python -m flask sales next-invoice
#   Print the suggested next invoice number.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Operator
from .services.auth_service import create_operator, PasswordValidationError
from .services.invoice_service import next_invoice_number
from .time_utils import to_utc_z


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create any missing tables."""
    click.echo("START Initializing database...")
    db.create_all()
    click.echo("PASS Tables ready")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()
    click.echo("BUILD  Creating all tables...")
    db.create_all()
    click.echo("PASS Database reset complete")


@click.group('operators')
def operators_group():
    """Operator account management."""


@operators_group.command('create')
@click.option('--username', prompt=True, help='Login name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_operator_command(username, password):
    """Create an operator login."""
    try:
        operator = create_operator(username, password)
    except (PasswordValidationError, ValueError) as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created operator {operator.username} (ID: {operator.id})")


@operators_group.command('list')
@with_appcontext
def list_operators():
    """List all operators."""
    operators = db.session.query(Operator).order_by(Operator.username.asc()).all()

    if not operators:
        click.echo("No operators found.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<5} {'Username':<25} {'Active':<8} {'Last login'}")
    click.echo("="*70)

    for operator in operators:
        active_str = "Yes" if operator.is_active else "No"
        last_login = to_utc_z(operator.last_login_at) if operator.last_login_at else "never"
        click.echo(f"{operator.id:<5} {operator.username:<25} {active_str:<8} {last_login}")

    click.echo("="*70 + "\n")


@operators_group.command('deactivate')
@click.argument('username')
@with_appcontext
def deactivate_operator(username):
    """Block an operator from logging in."""
    operator = db.session.query(Operator).filter_by(username=username).first()
    if not operator:
        raise click.ClickException(f"Operator '{username}' not found")

    operator.is_active = False
    db.session.commit()
    click.echo(f"PASS Deactivated operator {username}")


@click.group('sales')
def sales_group():
    """Sales helpers."""


@sales_group.command('next-invoice')
@with_appcontext
def next_invoice():
    """Print the suggested next invoice number."""
    click.echo(next_invoice_number())


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(operators_group)
    app.cli.add_command(sales_group)
