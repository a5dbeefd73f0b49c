"""Common exceptions and diagnostic output."""

## Configuration


def setDebuggingOptions(*, verbosity=0):
    """Configure tmhighlight's debugging options.

    Args:
        verbosity (int): Verbosity level. Zero by default, although the command-line
            interface uses 1 by default. See the :option:`--verbosity` option for the
            allowed values.
    """
    global verbosityLevel
    verbosityLevel = verbosity


#: Verbosity level. See :option:`--verbosity` for the allowed values.
verbosityLevel = 0


def verbosePrint(*objects, level=1, indent=0, sep=" ", end="\n", file=None):
    """Print a message only if the verbosity level is at least **level**.

    Args:
        objects: Object(s) to print (`str` will be called to make them strings).
        level (int): Minimum verbosity level at which to print. Default is 1.
        indent (int): Nesting depth of the message; each level is two spaces.
        sep, end, file: As in `print`; **file** defaults to the current stdout.
    """
    if verbosityLevel >= level:
        if indent:
            print("  " * indent, end="", file=file)
        print(*objects, sep=sep, end=end, file=file)


## Exceptions


class TMHighlightError(Exception):
    """An error produced while building registries or highlighting code."""

    pass


class ManifestError(TMHighlightError):
    """An extension manifest or language configuration is malformed."""

    pass


class ThemeError(TMHighlightError):
    """A theme file could not be interpreted.

    Unlike extension problems, theme errors are never recovered from: without
    the theme's base colors there is no sensible way to render anything.
    """

    def __init__(self, location, message):
        self.location = location
        super().__init__(f"Problem parsing color theme file: {location}. {message}")


class UnknownThemeError(TMHighlightError, KeyError):
    """The requested theme label is not in the registry."""

    def __init__(self, label):
        self.label = label
        super().__init__(f"unknown theme {label!r}")

    def __str__(self):
        return self.args[0]


class RegistryError(TMHighlightError):
    """Persisted registry data is missing or inconsistent."""

    pass
