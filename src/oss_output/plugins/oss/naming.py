# src/oss_output/plugins/oss/naming.py
"""Remote object key naming.

A key is ``<file_path><sequence><file_ext>`` where the sequence is the
printf-style sequence format applied to (task index, partition index).
The default format ``".%03d.%02d"`` turns (2, 1) into ``".002.01"``.

Python's ``%`` operator never consults the locale for integer conversions,
so keys are identical across environments.
"""

import re

from oss_output.contracts.errors import ConfigurationError

DEFAULT_SEQUENCE_FORMAT = ".%03d.%02d"

# One printf conversion: %[(key)][flags][width][.precision][length]type
_CONVERSION_PATTERN = re.compile(
    r"%(?P<key>\([^)]*\))?(?P<flags>[-#0 +]*)(?P<width>\*|\d+)?(?:\.(?P<precision>\*|\d+))?[hlL]?(?P<type>.?)"
)
_INTEGER_CONVERSIONS = frozenset("diouxX")


def validate_sequence_format(sequence_format: str) -> str:
    """Check that a sequence format takes exactly two integer substitutions.

    The format is probed with the sentinel values (0, 0). Called once at
    configuration load so a bad template fails before any task starts.

    Args:
        sequence_format: printf-style template, e.g. ".%03d.%02d"

    Returns:
        The format, unchanged.

    Raises:
        ConfigurationError: If the template does not accept two integers.
    """
    conversions = []
    for match in _CONVERSION_PATTERN.finditer(sequence_format):
        conversion_type = match.group("type")
        if conversion_type == "%" and match.group(0) == "%%":
            continue
        conversions.append(match)
        if match.group("key") is not None:
            raise ConfigurationError(
                f"Invalid sequence_format {sequence_format!r}: mapping keys like {match.group(0)!r} are not supported"
            )
        if match.group("width") == "*" or match.group("precision") == "*":
            raise ConfigurationError(f"Invalid sequence_format {sequence_format!r}: '*' widths consume extra arguments")
        if conversion_type not in _INTEGER_CONVERSIONS:
            raise ConfigurationError(
                f"Invalid sequence_format {sequence_format!r}: conversion {match.group(0)!r} is not an integer conversion"
            )

    if len(conversions) != 2:
        raise ConfigurationError(
            f"Invalid sequence_format {sequence_format!r}: expected 2 integer conversions "
            f"(task index, partition index), found {len(conversions)}"
        )

    try:
        sequence_format % (0, 0)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid sequence_format {sequence_format!r}: {e}") from e

    return sequence_format


class KeyNamer:
    """Derives object keys for (task index, partition index) pairs.

    Keys are unique across a job as long as the sequence format renders both
    indices distinctly (the default zero-pads both).
    """

    def __init__(self, file_path: str, sequence_format: str, file_ext: str) -> None:
        self._file_path = file_path
        self._sequence_format = validate_sequence_format(sequence_format)
        self._file_ext = file_ext

    def build_key(self, task_index: int, partition_index: int) -> str:
        """Return the object key for a task's partition."""
        sequence = self._sequence_format % (task_index, partition_index)
        return f"{self._file_path}{sequence}{self._file_ext}"
