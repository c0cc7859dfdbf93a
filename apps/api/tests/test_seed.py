"""Tests for CMS bootstrap data and the CLI."""
from click.testing import CliRunner

from portal import cli as portal_cli
from portal.services import cms_admin_service, content_service, seed_service


def test_seed_cms_is_idempotent(db):
    first = seed_service.seed_cms(db, admin_password="bootstrap-pass")
    second = seed_service.seed_cms(db, admin_password="bootstrap-pass")

    assert first.content_types == 4
    assert first.admin_created is True
    assert first.content_items == 2
    assert first.guides == 4
    assert second.content_types == 0
    assert second.admin_created is False
    assert second.content_items == 0


def test_seeded_admin_and_content(db):
    seed_service.seed_cms(db, admin_password="bootstrap-pass")

    admin = cms_admin_service.authenticate(db, seed_service.DEFAULT_ADMIN_EMAIL, "bootstrap-pass")
    assert admin is not None
    assert admin.role == "super_admin"

    hero = content_service.get_published_item(db, "home_hero")
    assert hero.content["buttonText"] == "Get Started Now"


def test_seed_skips_admin_when_one_exists(db, editor):
    result = seed_service.seed_cms(db)

    assert result.admin_created is False
    assert result.content_items == 0


def test_cli_create_admin(db, monkeypatch, session_factory):
    monkeypatch.setattr(portal_cli, "SessionLocal", session_factory)

    result = CliRunner().invoke(
        portal_cli.cli,
        ["create-admin", "--email", "ops@cms.test", "--name", "Ops", "--role", "admin",
         "--password", "cli-password"],
    )

    assert result.exit_code == 0, result.output
    assert "Created admin ops@cms.test" in result.output
    assert cms_admin_service.get_admin_by_email(db, "ops@cms.test").role == "admin"
