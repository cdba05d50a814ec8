"""Shared exception hierarchy for partner ledger services."""

# ── Snapshot ──────────────────────────────────────────────────────────────────


class SnapshotError(Exception):
    """Base exception for snapshot retrieval errors."""


class SnapshotLoadError(SnapshotError):
    """The snapshot could not be read from storage. Safe to retry."""

    retryable: bool = True


# ── Partner editors ───────────────────────────────────────────────────────────


class PartnerServiceError(Exception):
    """Base exception for partner write operations."""


class PartnerNotFoundError(PartnerServiceError):
    """Referenced partner does not exist."""


class ClientNotFoundError(PartnerServiceError):
    """Referenced client does not exist."""


class InvalidSplitError(PartnerServiceError):
    """Split pair is out of range or does not total 100%."""


class InvalidPaymentError(PartnerServiceError):
    """Payment amount is not a positive number."""


# ── Auto-assignment ───────────────────────────────────────────────────────────


class AutoAssignmentError(Exception):
    """Auto-assignment run failed."""


# ── Export ────────────────────────────────────────────────────────────────────


class ExportError(Exception):
    """An export file could not be written."""
