from collections.abc import Iterable

from logvault.exceptions import UploadError
from logvault.logging import LoggerType, get_logger
from logvault.notify import Notifier, NullNotifier
from logvault.schema import LogRecord, RunSummary
from logvault.state import TransferStateInterface, validate_identifier
from logvault.storage import ObjectStorageInterface

__all__ = ("TransferEngine", "transfer_logs")


class TransferEngine:
    """
    Uploads logs that are not yet in the transfer state.

    An identifier is recorded only after its upload succeeded, so a log
    present in the state is always present in the bucket. A crash between
    upload and record only leads to the same key being written again on the
    next run.
    """

    def __init__(
        self,
        state: TransferStateInterface,
        storage: ObjectStorageInterface,
        *,
        prefix: str = "",
        notifier: Notifier | None = None,
        logger: LoggerType | None = None,
    ):
        self.state = state
        self.storage = storage
        self.prefix = prefix
        self.notifier = notifier or NullNotifier()
        self.logger = logger or get_logger(__name__)

    def run(self, records: Iterable[LogRecord]) -> RunSummary:
        summary = RunSummary()
        for record in records:
            self.process(record, summary)
        return summary

    def process(self, record: LogRecord, summary: RunSummary) -> None:
        identifier = record.identifier
        if identifier in self.state:
            self.logger.info("log-skipped", identifier=identifier)
            summary.skipped += 1
            return

        key = record.object_key(self.prefix)
        try:
            validate_identifier(identifier)
        except ValueError as e:
            # the state could not record it, so uploading would repeat on every run
            self._fail(identifier.encode("utf-8", "backslashreplace").decode("utf-8"), key, str(e), summary)
            return

        try:
            self.storage.put_object(key, record.path)
        except UploadError as e:
            self._fail(identifier, key, str(e), summary)
            return

        # state errors propagate, uploading on without bookkeeping would lose track of logs
        self.state.add(identifier)
        self.logger.info("log-uploaded", identifier=identifier, bucket=self.storage.bucket, key=key)
        summary.uploaded += 1

    def _fail(self, identifier: str, key: str, error: str, summary: RunSummary) -> None:
        self.logger.error("log-upload-failed", identifier=identifier, key=key, error=error)
        summary.failed += 1
        summary.failed_identifiers.append(identifier)
        self.notifier.notify(f"Log upload failed: {identifier}", error)


def transfer_logs(
    records: Iterable[LogRecord],
    state: TransferStateInterface,
    storage: ObjectStorageInterface,
    *,
    prefix: str = "",
    notifier: Notifier | None = None,
    logger: LoggerType | None = None,
) -> RunSummary:
    """
    Upload every record whose identifier is not in `state`.

    Args:
        records: Logs to consider, processed sequentially in the given order.
        state: Transfer state, consulted and appended to.
        storage: Destination object storage.
        prefix: Optional key prefix inside the bucket.
        notifier: Told about every failed upload.
        logger: Logger to use.

    Returns:
        RunSummary: Uploaded, skipped and failed counts of this run.
    """
    engine = TransferEngine(state, storage, prefix=prefix, notifier=notifier, logger=logger)
    return engine.run(records)
