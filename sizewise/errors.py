class SizewiseError(Exception):
    """Base class for errors raised by the recommendation engine."""


class MalformedChartError(SizewiseError):
    """A size chart had too few usable lines or no numeric cells.

    Chart normalization reports this case by returning ``None`` and logging
    ``size_chart_rejected``.
    """


class NoRelevantMeasurementsError(SizewiseError):
    def __init__(self, category: str | None = None) -> None:
        self.category = category
        super().__init__("Please add your measurements in the profile section first")


class InvalidAIResponseFormat(SizewiseError):
    """The model response is missing required sections."""


class TextGenerationError(SizewiseError):
    """The text generation collaborator failed or returned nothing."""


class AnalysisInProgressError(SizewiseError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Analysis already in progress for {url}")
