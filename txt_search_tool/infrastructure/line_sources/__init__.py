"""Line source implementations."""
from .file_line_source import FileLineSource

__all__ = ["FileLineSource"]
