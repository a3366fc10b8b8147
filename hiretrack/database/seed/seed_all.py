import click
from flask.cli import with_appcontext

from hiretrack.database.seed.seed_jobs import seed as seed_jobs

SEEDERS = [
    ("jobs", seed_jobs),
]


@click.command("seed-all")
@with_appcontext
def seed_all():
    """Insert the sample job postings; existing rows are left alone."""
    click.echo("🌱 Seeding database...")
    added = {name: seeder() for name, seeder in SEEDERS}
    summary = ", ".join(f"{count} {name}" for name, count in added.items())
    click.echo(f"✅ All seeders completed! ({summary} added)")
