"""versionguard: keep a project's build version monotonic across commits."""

__version__ = "0.1.0"
