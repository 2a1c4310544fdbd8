# localehtml/errors.py
"""Exception types raised across the localized HTML build."""


class LocaleHtmlError(Exception):
    """Base error for the localized HTML build."""


class RootNotFoundError(LocaleHtmlError):
    """The HTML template has no root div to receive prerendered markup."""

    def __init__(self, message=None):
        super().__init__(message or (
            "Unable find root div element. Please verify it exists within your HTML template."
        ))


class RenderError(LocaleHtmlError):
    """A render collaborator failed for one locale."""

    def __init__(self, locale: str, reason: str):
        self.locale = locale
        self.reason = reason
        super().__init__(f"render failed for {locale}: {reason}")
