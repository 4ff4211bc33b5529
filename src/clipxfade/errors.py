"""Exception taxonomy for clipxfade.

Every error the CLI reports deliberately derives from ClipXfadeError and
carries the process exit code it maps to. Validation errors also subclass
ValueError (and runtime failures RuntimeError) so callers that only know
the builtin hierarchy still catch them.
"""


class ClipXfadeError(Exception):
    """Base class for all clipxfade errors."""

    exit_code = 1


class ArgumentError(ClipXfadeError):
    """Malformed command-line arguments or unusable input paths."""


class ConfigError(ClipXfadeError, ValueError):
    """Unreadable or invalid config file."""


class ProbeError(ClipXfadeError, RuntimeError):
    """A clip could not be inspected by ffprobe."""

    def __init__(self, path, message):
        super().__init__(f"{path}: {message}")
        self.path = str(path)


class CompilerValidationError(ClipXfadeError, ValueError):
    """Inputs rejected by the transition graph compiler."""


class InsufficientInputs(CompilerValidationError):
    pass


class InvalidDuration(CompilerValidationError):
    pass


class InvalidEffectList(CompilerValidationError):
    pass


class ExecutionError(ClipXfadeError, RuntimeError):
    """ffmpeg exited with a nonzero status. The status becomes our exit code."""

    def __init__(self, code, cmd=None):
        super().__init__(f"ffmpeg failed with exit code {code}")
        self.code = code
        self.cmd = cmd

    @property
    def exit_code(self):
        return self.code
