"""Exception taxonomy for composition.

InputError is raised before any capture resource exists. The capability
errors describe a host that cannot encode or cannot provide a surface.
EncodingFault is raised once capture has started and the session has
released its resources.
"""


class InputError(ValueError):
    """Invalid timeline, orientation, or unloadable image."""


class CapabilityUnavailable(RuntimeError):
    """The host runtime lacks something composition needs."""


class UnsupportedCodec(CapabilityUnavailable):
    """No encoder/container combination the host can provide."""


class SurfaceUnavailable(CapabilityUnavailable):
    """The render surface could not be created."""


class EncodingFault(RuntimeError):
    """The encoder failed while a capture was active."""
