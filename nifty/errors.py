"""Exceptions raised by the generator."""


class NiftyError(Exception):
    """Base exception for generation errors."""
    pass


class ConfigError(NiftyError):
    """Invalid configuration document or settings."""
    def __init__(self, message: str, field: str | None = None):
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class AssetError(NiftyError):
    """Missing, unreadable or unsupported asset file."""
    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class EncodingError(NiftyError):
    """External encoder missing or failed."""
    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stderr: str = "",
        retryable: bool = True,
    ):
        self.returncode = returncode
        self.stderr = stderr
        self.retryable = retryable
        if returncode is not None:
            message = f"{message} (exit code {returncode})"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class OutputError(NiftyError):
    """Output path could not be created or written."""
    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class TokenError(NiftyError):
    """Failure while generating a single token."""
    def __init__(self, token_id: int, cause: Exception):
        self.token_id = token_id
        self.cause = cause
        super().__init__(f"token #{token_id}: {cause}")


class GenerationError(NiftyError):
    """Generation run aborted; carries the partial report."""
    def __init__(self, report):
        self.report = report
        failed = ", ".join(f"#{f.token_id}" for f in report.failures)
        super().__init__(f"generation aborted after failures in {failed}")
