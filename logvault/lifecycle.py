from typing import Any

from logvault.exceptions import LifecycleError
from logvault.logging import LoggerType, get_logger
from logvault.schema import LifecycleOutcome
from logvault.storage import ObjectStorageInterface

__all__ = ("RULE_ID", "build_lifecycle_configuration", "ensure_lifecycle_policy")

RULE_ID = "TransitionToGlacier"


def build_lifecycle_configuration(
    transition_days: int = 30,
    expiration_days: int = 365,
    storage_class: str = "GLACIER",
) -> dict[str, Any]:
    """
    Build the tiered retention policy applied to every object of the bucket.

    Args:
        transition_days: Days after which objects move to `storage_class`.
        expiration_days: Days after which objects are deleted.
        storage_class: Cold storage class to transition to.

    Raises:
        ValueError: If a day count is not positive or expiration does not come after transition.
    """
    if transition_days <= 0 or expiration_days <= 0:
        raise ValueError("Lifecycle day counts must be greater than zero")
    if expiration_days <= transition_days:
        raise ValueError("Expiration must come after transition")

    return {
        "Rules": [
            {
                "ID": RULE_ID,
                "Filter": {},
                "Status": "Enabled",
                "Transitions": [{"Days": transition_days, "StorageClass": storage_class}],
                "Expiration": {"Days": expiration_days},
            }
        ]
    }


def ensure_lifecycle_policy(
    storage: ObjectStorageInterface,
    configuration: dict[str, Any],
    logger: LoggerType | None = None,
) -> LifecycleOutcome:
    """
    Install `configuration` unless the bucket already has a lifecycle configuration.

    An existing configuration is never inspected or changed. Failures are
    logged and reported as `LifecycleOutcome.FAILED`, they never abort the run.
    """
    logger = logger or get_logger(__name__)

    try:
        existing = storage.get_lifecycle_configuration()
        if existing is not None:
            logger.info("lifecycle-already-applied", bucket=storage.bucket)
            return LifecycleOutcome.ALREADY_APPLIED

        logger.info("lifecycle-applying", bucket=storage.bucket)
        storage.put_lifecycle_configuration(configuration)
    except LifecycleError as e:
        logger.error("lifecycle-failed", bucket=storage.bucket, error=str(e))
        return LifecycleOutcome.FAILED

    logger.info("lifecycle-applied", bucket=storage.bucket)
    return LifecycleOutcome.APPLIED
