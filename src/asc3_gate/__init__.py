"""ASC3 session gate - tenant-aware auth and routing for the contribution portal."""

__all__ = ["AuthContext", "Decision", "SessionStore"]
__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy imports so settings are not read until something needs them."""
    if name == "AuthContext":
        from asc3_gate.auth.context import AuthContext

        return AuthContext
    if name == "Decision":
        from asc3_gate.guards import Decision

        return Decision
    if name == "SessionStore":
        from asc3_gate.session.store import SessionStore

        return SessionStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
