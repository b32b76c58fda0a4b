"""Exception types raised by kubedump."""


class KubeDumpError(Exception):
    """Base class for kubedump errors."""


class ConfigurationError(KubeDumpError):
    """Invalid run configuration or override file."""


class OutputDirectoryExistsError(KubeDumpError):
    """The output directory exists and removal was not requested."""


class KubectlError(KubeDumpError):
    """A kubectl invocation failed, timed out or returned unusable output."""


class DiscoveryError(KubeDumpError):
    """The resource catalog could not be retrieved."""


class InvalidObjectError(KubeDumpError):
    """An object lacks the structure needed to export it."""


class ManifestError(KubeDumpError):
    """A manifest file could not be read or parsed."""
