from contextlib import ExitStack

from logvault.engine import transfer_logs
from logvault.exceptions import PreconditionError, RunLogUnavailableError
from logvault.lifecycle import build_lifecycle_configuration, ensure_lifecycle_policy
from logvault.logging import LoggerType, attached_handler, get_logger
from logvault.logging.handlers import FileHandlerConfig
from logvault.notify import Notifier, create_notifier
from logvault.preconditions import check_preconditions
from logvault.schema import RunSummary
from logvault.settings import Settings
from logvault.source import FileSystem, SourceLayout, walk_source
from logvault.state import FileTransferState, TransferStateInterface
from logvault.storage import ObjectStorageInterface, create_s3_storage

__all__ = ("run", "run_once")

EXIT_OK = 0
EXIT_PRECONDITION_FAILED = 1


def _create_storage(settings: Settings) -> ObjectStorageInterface:
    return create_s3_storage(
        bucket=settings.BUCKET,
        region_name=settings.AWS_REGION,
        endpoint_url=settings.AWS_S3_ENDPOINT_URL,
        access_key_id=settings.AWS_ACCESS_KEY_ID,
        secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        connect_timeout=settings.CONNECT_TIMEOUT,
        read_timeout=settings.READ_TIMEOUT,
        max_attempts=settings.MAX_ATTEMPTS,
    )


def run_once(
    settings: Settings,
    storage: ObjectStorageInterface,
    state: TransferStateInterface,
    notifier: Notifier,
    fs: FileSystem | None = None,
    logger: LoggerType | None = None,
) -> RunSummary:
    """
    Run provisioning and transfer against already checked collaborators.

    The state is loaded before anything touches the bucket, so an unusable
    state file stops the run without side effects.

    Returns:
        RunSummary: Counters of the transfer.

    Raises:
        StateUnavailableError: If the state file cannot be opened.
    """
    logger = logger or get_logger(__name__)

    configuration = build_lifecycle_configuration(
        transition_days=settings.TRANSITION_DAYS,
        expiration_days=settings.EXPIRATION_DAYS,
        storage_class=settings.STORAGE_CLASS,
    )
    layout = SourceLayout(builds_dirname=settings.BUILDS_DIRNAME, log_filenames=tuple(settings.LOG_FILENAMES))

    with state:
        ensure_lifecycle_policy(storage, configuration, logger=logger)
        return transfer_logs(
            walk_source(settings.SOURCE_DIR, layout, fs=fs),
            state,
            storage,
            prefix=settings.PREFIX,
            notifier=notifier,
            logger=logger,
        )


def _abort(error: PreconditionError, notifier: Notifier, logger: LoggerType) -> int:
    logger.critical(error.reason.replace(" ", "-"), reason=error.reason, error=str(error))
    notifier.notify(f"Log offload aborted: {error.reason}", str(error))
    return EXIT_PRECONDITION_FAILED


def run(
    settings: Settings,
    *,
    storage: ObjectStorageInterface | None = None,
    state: TransferStateInterface | None = None,
    notifier: Notifier | None = None,
    fs: FileSystem | None = None,
    logger: LoggerType | None = None,
) -> int:
    """
    Check preconditions, provision the lifecycle policy and offload new logs.

    Args:
        settings: Run configuration.
        storage: Destination storage. Defaults to an S3 client built from `settings`.
        state: Transfer state. Defaults to the state file from `settings`.
        notifier: Failure notifier. Defaults to the target from `settings`.
        fs: File system the source tree is read from.
        logger: Logger to use.

    Returns:
        int: Process exit status, non-zero only when a precondition failed.
    """
    logger = logger or get_logger(__name__)
    if notifier is None:
        notifier = create_notifier(
            settings.NOTIFY,
            from_address=settings.NOTIFY_FROM,
            smtp_host=settings.SMTP_HOST,
            smtp_port=settings.SMTP_PORT,
        )

    with ExitStack() as stack:
        if settings.RUN_LOG:
            try:
                stack.enter_context(attached_handler(FileHandlerConfig(path=settings.RUN_LOG), "logvault"))
            except OSError as e:
                return _abort(RunLogUnavailableError(settings.RUN_LOG, str(e)), notifier, logger)

        if storage is None:
            storage = _create_storage(settings)
        if state is None:
            state = FileTransferState(settings.STATE_FILE)

        try:
            check_preconditions(settings.SOURCE_DIR, storage, fs=fs, logger=logger)
            summary = run_once(settings, storage, state, notifier, fs=fs, logger=logger)
        except PreconditionError as e:
            return _abort(e, notifier, logger)

        logger.info(
            "run-summary",
            message=f"Summary: {summary.describe()}",
            uploaded=summary.uploaded,
            skipped=summary.skipped,
            failed=summary.failed,
        )
        if summary.failed:
            notifier.notify(
                f"Log offload finished with {summary.failed} failed uploads",
                "Left for retry on the next run:\n" + "\n".join(summary.failed_identifiers),
            )
        return EXIT_OK
