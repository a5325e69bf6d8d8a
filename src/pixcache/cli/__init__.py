"""CLI for pixcache."""

# Import commands to register them with the app
# These imports have side effects (registering commands with @app.command())
from pixcache.cli.commands import kinds as _kinds_module  # noqa: F401
from pixcache.cli.commands import status as _status_module  # noqa: F401
from pixcache.cli.main import app, main


__all__ = ["app", "main"]
