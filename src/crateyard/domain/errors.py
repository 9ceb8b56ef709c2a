from typing import Optional


class CrateyardError(Exception):
    """base class for exceptions in crateyard."""
    pass


class IndexStoreError(CrateyardError):
    """base class for failures of the local index checkout."""
    pass


class IndexOpenError(IndexStoreError):
    """raised when the index checkout can neither be opened nor created."""
    pass


class IndexFetchError(IndexStoreError):
    """raised when fetching from the remote index fails."""
    def __init__(self, url: str, detail: str = ""):
        self.url = url
        message = f"failed to fetch `{url}`"
        if detail:
            message += f"\n{detail}"
        super().__init__(message)


class IndexIntegrityError(IndexStoreError):
    """raised when the checkout is missing the tracking ref or cannot be reset."""
    pass


class MetadataParseError(CrateyardError):
    """raised when a shard file contains a line that cannot be decoded."""
    def __init__(self, dependency: str, line_number: Optional[int] = None):
        self.dependency = dependency
        self.line_number = line_number
        message = f"Failed to parse registry's information for: {dependency}"
        if line_number is not None:
            message += f" (line {line_number})"
        super().__init__(message)


class ConfigMissingError(CrateyardError):
    """raised when the registry's config.json is absent or malformed."""
    pass


class TransportError(CrateyardError):
    """raised when a download does not produce a 200 response."""
    def __init__(self, url: str, status_code: Optional[int] = None, detail: str = ""):
        self.url = url
        self.status_code = status_code
        if status_code is None:
            message = f"Failed to connect to {url}"
        else:
            message = f"Failed to get 200 response from {url} (got {status_code})"
        if detail:
            message += f"\n{detail}"
        super().__init__(message)


class ChecksumCacheMiss(CrateyardError):
    """raised when a download is attempted before its metadata was queried."""
    def __init__(self, package: str):
        self.package = package
        super().__init__(f"no hash listed for {package}")


class ChecksumMismatch(CrateyardError):
    """raised when downloaded content does not match the published checksum."""
    def __init__(self, package: str, expected: str, actual: str):
        self.package = package
        self.expected = expected
        self.actual = actual
        super().__init__(f"Failed to verify the checksum of `{package}`")


class UnpackError(CrateyardError):
    """raised when an archive cannot be decompressed or extracted."""
    pass


class RequirementError(CrateyardError, ValueError):
    """raised for version requirements that cannot be interpreted."""
    def __init__(self, requirement: str, reason: str = ""):
        self.requirement = requirement
        message = f"invalid version requirement `{requirement}`"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ManifestError(CrateyardError):
    """raised when an unpacked package has no readable manifest."""
    pass


class UnsafePathError(CrateyardError):
    """raised when a package id would place files outside their cache root."""
    pass
