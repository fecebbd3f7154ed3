"""jscall - DOM mailbox bridge between a host process and an embedded script runtime."""

__app_name__ = "jscall"
__version__ = "0.1.0"
