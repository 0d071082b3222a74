"""Exception types shared by the scheduler and its collaborators."""


class BreakBellError(Exception):
    """Base class for all BreakBell errors."""


class StartupError(BreakBellError):
    """Raised when the scheduler cannot start. Fatal to the process."""


class NotifierInitError(StartupError):
    """The desktop notification backend could not be initialised."""


class IconProvisionError(StartupError):
    """The notification icon could not be written to disk."""


class NotifyError(BreakBellError):
    """A notification could not be shown. Logged and ignored by the loop."""


class PlayError(BreakBellError):
    """Every sound playback strategy failed, including the terminal bell."""
