"""CLI tools for portal administration."""

import click

from portal.db.enums import CmsRole
from portal.db.session import SessionLocal


@click.group()
def cli():
    """Portal CLI tools."""
    pass


@cli.command()
@click.option("--admin-password", default=None, help="Password for the default super admin (if created)")
def seed_cms(admin_password: str | None):
    """
    Create default content types, the first super admin, sample content and guides.

    Safe to run repeatedly; existing rows are left alone.

    Example:
        python -m portal.cli seed-cms --admin-password "change-me-please"
    """
    from portal.services import seed_service

    db = SessionLocal()
    try:
        result = seed_service.seed_cms(
            db, admin_password=admin_password or seed_service.DEFAULT_ADMIN_PASSWORD
        )
        click.echo(f"✓ Content types created: {result.content_types}")
        click.echo(f"✓ Sample content created: {result.content_items}")
        click.echo(f"✓ Guides created: {result.guides}")
        if result.admin_created:
            click.echo(f"✓ Created super admin {seed_service.DEFAULT_ADMIN_EMAIL}")
            if not admin_password:
                click.echo("→ Default password in use. Change it before going live.")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="Admin email address")
@click.option("--name", required=True, help="Display name")
@click.option(
    "--role",
    type=click.Choice([r.value for r in CmsRole]),
    default=CmsRole.EDITOR.value,
    show_default=True,
)
@click.password_option()
def create_admin(email: str, name: str, role: str, password: str):
    """
    Create a CMS admin account.

    Example:
        python -m portal.cli create-admin --email "ops@example.com" --name "Ops" --role admin
    """
    from portal.schemas.cms import CmsAdminCreate
    from portal.services import cms_admin_service

    db = SessionLocal()
    try:
        admin = cms_admin_service.create_admin(
            db,
            CmsAdminCreate(email=email, name=name, role=CmsRole(role), password=password),
        )
        db.commit()
        click.echo(f"✓ Created {role} {admin.email} (id {admin.id})")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
def cleanup_locks():
    """Delete expired content locks."""
    from portal.services import content_lock_service

    db = SessionLocal()
    try:
        removed = content_lock_service.cleanup_expired_locks(db)
        click.echo(f"✓ Removed {removed} expired lock(s)")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
