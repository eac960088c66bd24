"""depwalk exception hierarchy.

All public exceptions inherit from DepwalkError, giving callers a single
base class to catch when they want to handle any depwalk-specific failure
without swallowing unrelated errors.

Only conditions that prevent a graph from being built are raised. Everything
else (stale snapshots, unresolved libraries, cycles) is reported as a
``Diagnostic`` and never used as control flow.
"""


class DepwalkError(Exception):
    """Base exception for all depwalk errors."""


class ManifestUnresolvableError(DepwalkError):
    """Raised when the root project cannot be found or parsed.

    Fatal: the host aborts before any provider chain or graph is built.
    """


class LockSnapshotError(DepwalkError):
    """Raised when a lock snapshot document cannot be read.

    Covers invalid JSON, missing required sections, and field values of
    the wrong type. The host downgrades this to a single "run restore"
    diagnostic instead of propagating it.
    """


class ProviderError(DepwalkError):
    """Raised when a library provider is misconfigured.

    Covers unreadable runtime profile definitions and malformed provider
    backing data discovered while building a provider's index.
    """
