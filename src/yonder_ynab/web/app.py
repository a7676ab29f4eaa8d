"""
Django application initialization.
"""

from ..config import Config
from . import settings as web_settings


def configure_django(config: Config) -> None:
    """
    Configure Django with our settings and the application config.

    The Config object is installed once as settings.YONDER_CONFIG; views
    read it from there for every request.
    """
    from django.conf import settings

    if not settings.configured:
        overrides = {
            name: getattr(web_settings, name) for name in dir(web_settings) if name.isupper()
        }
        overrides["YONDER_CONFIG"] = config
        settings.configure(**overrides)

    import django

    django.setup()


def get_wsgi_application(config: Config):
    """
    Get the Django WSGI application configured with our settings.

    Args:
        config: Application configuration
    """
    configure_django(config)

    from django.core.wsgi import get_wsgi_application as django_wsgi

    return django_wsgi()


def run_server(config: Config, host: str = "127.0.0.1", port: int = 8080):
    """
    Run the Django development server.

    Args:
        config: Application configuration
        host: Host to bind to
        port: Port to listen on
    """
    configure_django(config)

    from django.core.management import execute_from_command_line

    print(f"\n🌐 Listening on http://{host}:{port}/")
    print("📤 CSV upload:       POST /import?api_key=...")
    print("🤖 Telegram webhook: POST /")
    print(f"💰 YNAB budget:      {config.ynab.budget_id}")
    print("\nPress Ctrl+C to stop.\n")

    execute_from_command_line(
        [
            "manage.py",
            "runserver",
            f"{host}:{port}",
            "--noreload",  # Disable auto-reload for simpler operation
        ]
    )
