# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/cloudbook/cli.py
# Commands Legend (run from the repository root):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to cloudbook (PowerShell: $env:FLASK_APP="cloudbook").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (idempotent, keeps data).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Admin (tenant) inspection/bootstrap:
# - python -m flask admins create --email owner@shop.test --password "secret" --name Jane --last-name Doe
#   Create an admin account (prompts if options are omitted).
# - python -m flask admins list
#   List all admins.
#
# Maintenance:
# - python -m flask maintenance clear-expired-otps
#   Null out OTP codes whose deadline has passed.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Admin
from .services import auth_service, otp_service
from .validation import ConflictError, ValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables ready.")


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

    click.echo("PASS Database reset complete. Run 'python -m flask admins create' to add an admin.")


@click.group('admins')
def admins_group():
    """Admin (tenant) management commands."""


@admins_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--name', prompt=True, help='First name')
@click.option('--last-name', prompt=True, help='Last name')
@click.option('--company', default='CloudBook', show_default=True, help='Company name')
@click.option('--contact', default='-', show_default=True, help='Contact number')
@click.option('--address', default='-', show_default=True, help='Postal address')
@click.option('--role', default='admin', show_default=True, help='Role label')
@with_appcontext
def create_admin_cli(email, password, name, last_name, company, contact, address, role):
    """Create an admin the same way /api/auth/sign-up does."""
    try:
        admin = auth_service.register_admin({
            "email": email,
            "password": password,
            "name": name,
            "last_name": last_name,
            "company": company,
            "contact": contact,
            "address": address,
            "role": role,
        })
    except (ValidationError, ConflictError) as e:
        click.echo(f"FAIL {e}")
        raise SystemExit(1)

    click.echo(f"PASS Created admin {admin.email} (ID: {admin.id})")


@admins_group.command('list')
@with_appcontext
def list_admins():
    """List all admins."""
    admins = db.session.query(Admin).order_by(Admin.id.asc()).all()

    if not admins:
        click.echo("No admins found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Email':<35} {'Name':<25} {'Company'}")
    click.echo("="*90)

    for admin in admins:
        full_name = f"{admin.name} {admin.last_name}"
        click.echo(f"{admin.id:<5} {admin.email:<35} {full_name:<25} {admin.company}")

    click.echo("="*90 + "\n")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('clear-expired-otps')
@with_appcontext
def clear_expired_otps_cli():
    """Null out OTP fields whose deadline has passed."""
    cleared = otp_service.clear_expired_otps()
    click.echo(f"Cleared {cleared} expired OTP(s).")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(admins_group)
    app.cli.add_command(maintenance_group)
