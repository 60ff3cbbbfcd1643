import json
from pathlib import Path
from typing import Annotated, Any, Literal

from cyclopts import App, Parameter, validators
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from logvault.exceptions import InvalidSettingsError
from logvault.lifecycle import build_lifecycle_configuration
from logvault.logging import LogLevel, setup_logging
from logvault.runner import run as run_offload
from logvault.settings import Settings
from logvault.state import read_identifiers

setup_logging()

EXIT_INVALID_SETTINGS = 2

console = Console()
app = App(name="logvault", console=console, help="Offload CI build logs to object storage")


def _load_settings(**overrides: Any) -> Settings:
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except InvalidSettingsError as e:
        title = Text("Invalid Settings", style="bold red")
        content = "\n".join([f"• {error}" for error in e.errors])
        console.print(Panel(content, title=title, border_style="red", padding=(1, 2)))
        raise SystemExit(EXIT_INVALID_SETTINGS) from e


@app.default
def run(
    *,
    source_dir: Annotated[Path | None, Parameter(name=("-s", "--source-dir"))] = None,
    bucket: Annotated[str | None, Parameter(name=("-b", "--bucket"))] = None,
    prefix: Annotated[str | None, Parameter(name="--prefix")] = None,
    state_file: Annotated[Path | None, Parameter(name="--state-file")] = None,
    run_log: Annotated[Path | None, Parameter(name="--run-log")] = None,
    notify: Annotated[str | None, Parameter(name="--notify")] = None,
    transition_days: Annotated[int | None, Parameter(validator=validators.Number(gt=0))] = None,
    expiration_days: Annotated[int | None, Parameter(validator=validators.Number(gt=0))] = None,
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
):
    """
    Upload build logs that were not uploaded by a previous run

    Options default to the LOGVAULT_* environment variables.

    Args:
        source_dir: Directory with one subdirectory per job
        bucket: Destination bucket
        prefix: Key prefix inside the bucket
        state_file: File recording uploaded logs
        run_log: File the run log is appended to
        notify: Email address or webhook URL told about failures
        transition_days: Days before logs move to cold storage
        expiration_days: Days before logs are deleted
        log_level: Console and run log level
    """
    settings = _load_settings(
        SOURCE_DIR=source_dir,
        BUCKET=bucket,
        PREFIX=prefix,
        STATE_FILE=state_file,
        RUN_LOG=run_log,
        NOTIFY=notify,
        TRANSITION_DAYS=transition_days,
        EXPIRATION_DAYS=expiration_days,
        LOG_LEVEL=log_level,
    )
    setup_logging(LogLevel[settings.LOG_LEVEL])

    exit_status = run_offload(settings)
    if exit_status:
        raise SystemExit(exit_status)


@app.command
def policy(
    *,
    transition_days: Annotated[int | None, Parameter(validator=validators.Number(gt=0))] = None,
    expiration_days: Annotated[int | None, Parameter(validator=validators.Number(gt=0))] = None,
):
    """
    Print the lifecycle configuration installed on buckets without one

    Args:
        transition_days: Days before logs move to cold storage
        expiration_days: Days before logs are deleted
    """
    settings = _load_settings(TRANSITION_DAYS=transition_days, EXPIRATION_DAYS=expiration_days)
    configuration = build_lifecycle_configuration(
        transition_days=settings.TRANSITION_DAYS,
        expiration_days=settings.EXPIRATION_DAYS,
        storage_class=settings.STORAGE_CLASS,
    )
    console.print_json(json.dumps(configuration))


@app.command
def status(
    *,
    state_file: Annotated[Path | None, Parameter(name="--state-file")] = None,
):
    """
    Print how many logs are recorded as uploaded

    Args:
        state_file: File recording uploaded logs
    """
    settings = _load_settings(STATE_FILE=state_file)
    if not settings.STATE_FILE.is_file():
        console.print(f"No state file at {settings.STATE_FILE}")
        return

    count = len(read_identifiers(settings.STATE_FILE))
    console.print(f"{count} logs recorded as uploaded in {settings.STATE_FILE}")
