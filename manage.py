from bloodcamp.app import create_app, db

from flask_migrate import Migrate
from flask.cli import FlaskGroup
import click
from flask import current_app

from bloodcamp.services.certificates import prepare_certificate
from bloodcamp.services.csv_export import build_registrations_csv, export_filename
from bloodcamp.services.registrations import list_registrations
from bloodcamp.shared.certificate_export import CertificateExportError, export_certificate
from bloodcamp.shared.passwords import hash_password
from bloodcamp.shared.time import today_in


migrate = Migrate()


def create_bloodcamp_app():
    app = create_app()
    migrate.init_app(app, db)
    return app


cli = FlaskGroup(create_app=create_bloodcamp_app)


@cli.command("render_cert")
@click.option("--name", "name", required=True, help="Name as printed, prefix included")
@click.option("--format", "fmt", default="png", type=click.Choice(["png", "jpg"]))
@click.option("--out", "out_path", default=None, help="Output file path")
def render_cert(name: str, fmt: str, out_path: str | None):
    """Render a certificate image for NAME."""
    state = prepare_certificate(name)
    try:
        result = export_certificate(state, fmt)
    except CertificateExportError as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(2)
    if result is None:
        click.echo("Nothing rendered: name is blank", err=True)
        raise SystemExit(1)
    target = out_path or result.filename
    with open(target, "wb") as fh:
        fh.write(result.data)
    if state.background_missing:
        click.echo("warning: background missing, rendered without backdrop", err=True)
    click.echo(target)


@cli.command("export_csv")
@click.option("--out", "out_path", default=None, help="Output file path")
def export_csv(out_path: str | None):
    """Write the registrations CSV export."""
    registrants = list_registrations()
    if not registrants:
        click.echo("No registrations available to export", err=True)
        return
    tz = current_app.config.get("CAMP_TIMEZONE")
    target = out_path or export_filename(today_in(tz))
    with open(target, "w", encoding="utf-8", newline="") as fh:
        fh.write(build_registrations_csv(registrants, tz))
    click.echo(f"{target} rows={len(registrants)}")


@cli.command("hash_admin_password")
@click.password_option()
def hash_admin_password(password: str):
    """Print a hash suitable for ADMIN_PASSWORD_HASH."""
    click.echo(hash_password(password))


if __name__ == "__main__":
    cli()
