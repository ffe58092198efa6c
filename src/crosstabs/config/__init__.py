from .options import ReportOptions, default_palette
from .schema import ReportConfig

__all__ = ["ReportOptions", "ReportConfig", "default_palette"]
