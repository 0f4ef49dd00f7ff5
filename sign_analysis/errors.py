"""Errors raised while turning a sign image into a feature vector."""


class SignAnalysisError(Exception):
    """Raised when a sign image cannot be analyzed.

    Fatal for the current image only; batch callers skip the image and continue.
    """
