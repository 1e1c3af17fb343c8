import click

from inventario import create_app

app = create_app()

SAFE_KEYS = (
    "EQUIPMENT_BACKEND",
    "AUTH_BACKEND",
    "SUPABASE_URL",
    "EQUIPMENT_TABLE",
    "BACKEND_TIMEOUT",
    "LOG_FORMAT",
    "APP_TZ",
    "APP_VERSION",
)


@app.cli.command("show-config")
def show_config() -> None:
    """Muestra la configuración efectiva sin secretos."""

    for key in SAFE_KEYS:
        click.echo(f"{key}={app.config.get(key)}")
    click.echo(f"SUPABASE_KEY={'definida' if app.config.get('SUPABASE_KEY') else 'vacía'}")


if __name__ == "__main__":
    app.cli.main()
