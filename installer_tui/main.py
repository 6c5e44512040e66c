import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from installer_tui import __version__
from installer_tui.config_io import JsonFileBackend, MemoryBackend, PersistenceBackend
from installer_tui.exceptions import ConfigError
from installer_tui.logging_setup import console_logging_suspended, setup_logging
from installer_tui.menu import InstallerSettings, WizardController, create_registry
from installer_tui.menu.models import validate_config_map
from installer_tui.store import ConfigStore
from installer_tui.tui import InstallerApp

app = typer.Typer(
    name="installer-tui",
    help="Interactive filesystem, RAID and network configuration for the installer.",
    add_completion=False,
    pretty_exceptions_show_locals=False,
)


def create_backend(settings: InstallerSettings) -> PersistenceBackend:
    if settings.config_path is not None:
        return JsonFileBackend(settings.config_path)
    return MemoryBackend()


def run_wizard(store: ConfigStore, settings: InstallerSettings) -> bool:
    """Run the Textual wizard over ``store``; True when every step was completed."""
    controller = WizardController(store, create_registry(settings))
    with console_logging_suspended():
        completed = InstallerApp(controller).run()
    return bool(completed)


def main(settings: InstallerSettings) -> bool:
    logger.info("Starting installer configuration")
    try:
        store = ConfigStore.load(create_backend(settings))
    except ConfigError as e:
        logger.error(f"Failed to load configuration: {e!s}")
        return False

    if settings.silent:
        errors = validate_config_map(store)
        if errors:
            for error_msg in errors:
                logger.error(f"Validation error: {error_msg}")
            return False
        try:
            store.save()
        except ConfigError as e:
            logger.error(f"Failed to save configuration: {e!s}")
            return False
    elif not run_wizard(store, settings):
        logger.info("Installer configuration aborted")
        return False

    typer.echo(json.dumps(store.snapshot(), indent=4, sort_keys=True))
    logger.info("Installer configuration completed")
    return True


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"installer-tui {__version__}")
        raise typer.Exit()


@app.command()
def run(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="JSON configuration file holding prior answers; answers are saved back to it."),
    ] = None,
    silent: Annotated[bool, typer.Option("--silent", help="Skip the UI; validate and save the loaded answers.")] = False,
    allow_static_cancel: Annotated[
        bool,
        typer.Option("--allow-static-cancel", help="Allow leaving the static network form without confirming."),
    ] = False,
    log_file: Annotated[Path | None, typer.Option("--log-file", help="Also write debug logs to this file.")] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Verbose console logging.")] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", help="Show version and exit.", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Collect the installer configuration."""
    settings = InstallerSettings(
        config_path=config,
        silent=silent,
        allow_static_cancel=allow_static_cancel,
        log_file=log_file,
        debug=debug,
    )
    setup_logging(settings.log_file, settings.debug)
    if not main(settings):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
