class InterviewError(Exception):
    """Base class for interview flow failures."""


class InvalidTransitionError(InterviewError):
    """The requested action is not valid in the session's current phase."""


class HardwareAccessError(InterviewError):
    """Camera or microphone could not be acquired."""


class HardwareNotReadyError(InterviewError):
    """The hardware check has not passed yet, so the interview cannot start."""
