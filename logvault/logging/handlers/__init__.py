from .file import FileHandlerConfig

__all__ = ("FileHandlerConfig",)
