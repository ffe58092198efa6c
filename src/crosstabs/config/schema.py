from pydantic import BaseModel, ConfigDict, Field

from src.crosstabs.config.options import DEFAULT_XLABEL, ReportOptions

# ---------- Report run file ----------


class ReportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    target: str
    explanatory: list[str] = Field(min_length=1)

    labels: dict[str, str] = Field(default_factory=dict)
    category_orders: dict[str, list[str | int | float]] = Field(default_factory=dict)

    palette: list[str] | None = None
    title_suffix: str = ""
    xlabel: str = DEFAULT_XLABEL
    ylabel_suffix: str = ""

    def to_options(self) -> ReportOptions:
        """Build ReportOptions, keeping the default gradient when no palette is given."""
        options = ReportOptions(
            title_suffix=self.title_suffix,
            xlabel=self.xlabel,
            ylabel_suffix=self.ylabel_suffix,
            label_dictionary=dict(self.labels),
        )
        if self.palette:
            options.palette = list(self.palette)
        return options
