"""Exceptions raised by the color extraction pipeline."""


class InvalidArgumentError(ValueError):
    """A caller supplied a parameter or image the pipeline cannot accept."""
    pass


class ExtractionError(RuntimeError):
    """Extraction could not run, typically because the image failed to decode."""
    pass
