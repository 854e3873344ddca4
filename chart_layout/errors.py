from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when input records cannot be turned into data points at all."""


class ChartConfigError(ValueError):
    """Raised for unknown option names and out-of-range option values."""


class UnsupportedVariantError(ChartConfigError):
    pass


class LayoutLookupError(KeyError):
    """A caller id or category that the computed structures do not contain.

    These are contract violations between the caller and the engine and are
    not meant to be recovered locally.
    """

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class ScaleLookupError(LayoutLookupError):
    pass


class StackLookupError(LayoutLookupError):
    pass


class SeriesLookupError(LayoutLookupError):
    pass
