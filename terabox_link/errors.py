from typing import Optional


class ShareError(Exception):
    """Base class for classified failures."""

    code = "UNKNOWN_ERROR"
    status_code = 500
    message = "Failed to get download link. Please try again later."

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(ShareError):
    """Malformed or unsupported client input."""

    code = "VALIDATION_ERROR"
    status_code = 400


class InvalidUrl(ValidationError):
    code = "INVALID_URL"
    message = "Invalid URL. Please provide a valid Terabox sharing link."


class UnsupportedDomain(ValidationError):
    code = "UNSUPPORTED_DOMAIN"
    message = "Invalid Terabox URL. Please provide a valid Terabox sharing link."


class ShareIdNotFound(ValidationError):
    code = "SHARE_ID_NOT_FOUND"
    message = "Could not extract share ID from URL"


class PasswordRequired(ShareError):
    code = "PASSWORD_REQUIRED"
    status_code = 400
    message = "This share is password protected. Please provide the correct password."


class ShareNotFound(ShareError):
    code = "SHARE_NOT_FOUND"
    status_code = 404
    message = "Share not found or expired. Please check the URL."


class NoFilesInShare(ShareNotFound):
    code = "NO_FILES_IN_SHARE"
    message = "No files found in the share."


class NoLinksResolved(ShareError):
    code = "NO_LINKS_RESOLVED"
    status_code = 500
    message = (
        "Could not get download links for any files. "
        "The share might be password protected or expired."
    )


class UpstreamTimeout(ShareError):
    code = "UPSTREAM_TIMEOUT"
    status_code = 503
    message = "Request timeout. Please try again."


class UpstreamUnavailable(ShareError):
    code = "UPSTREAM_UNAVAILABLE"
    status_code = 503
    message = "Access denied. Please check the server cookie or the share might be private."


class ConfigurationError(ShareError):
    code = "CONFIGURATION_ERROR"
    status_code = 500
    message = "Server configuration error. Please contact administrator."


class UnknownUpstreamError(ShareError):
    code = "UPSTREAM_ERROR"
    status_code = 500
