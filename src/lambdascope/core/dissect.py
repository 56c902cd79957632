"""Dissect pattern compiler.

Supports the subset of Elasticsearch dissect syntax the AWS pipelines need:
literal delimiters interleaved with ``%{key}`` captures. ``%{}`` and
``%{?key}`` capture and discard. Each key captures up to the first
occurrence of the delimiter that follows it; the last key captures the rest
of the string, or up to a trailing literal if the pattern ends with one.
"""

import re
from dataclasses import dataclass

from lambdascope.core.errors import FieldMismatchError

_KEY = re.compile(r"%\{([^}]*)\}")

# Append and reference modifiers
_UNSUPPORTED_MODIFIERS = ("+", "*", "&")


@dataclass(frozen=True)
class DissectKey:
    """One ``%{...}`` capture in a pattern.

    Attributes:
        name: Target field path, empty for skip keys.
        delimiter: Literal text that must follow the capture ("" for the end).
    """

    name: str
    delimiter: str

    @property
    def skip(self) -> bool:
        return not self.name


@dataclass(frozen=True)
class DissectPattern:
    """A compiled dissect pattern.

    Attributes:
        source: The pattern as written.
        prefix: Literal text that must open the value.
        keys: Captures in order of appearance.
    """

    source: str
    prefix: str
    keys: tuple[DissectKey, ...]

    @property
    def field_names(self) -> list[str]:
        """Target fields written by this pattern."""
        return [key.name for key in self.keys if not key.skip]

    def match(self, value: str) -> dict[str, str]:
        """Split a value according to the pattern.

        Args:
            value: The string to dissect.

        Returns:
            Mapping of target field path to captured text.

        Raises:
            FieldMismatchError: If the value does not fit the pattern.
        """
        if not value.startswith(self.prefix):
            raise FieldMismatchError(
                self.source, f"value does not start with {self.prefix!r}"
            )
        captures: dict[str, str] = {}
        position = len(self.prefix)
        last = len(self.keys) - 1
        for index, key in enumerate(self.keys):
            if index == last:
                end = _final_end(value, position, key.delimiter)
                if end < 0:
                    raise FieldMismatchError(
                        self.source, f"value does not end with {key.delimiter!r}"
                    )
                next_position = len(value)
            else:
                end = value.find(key.delimiter, position)
                if end < 0:
                    raise FieldMismatchError(
                        self.source, f"delimiter {key.delimiter!r} not found"
                    )
                next_position = end + len(key.delimiter)
            captured = value[position:end]
            if not key.skip:
                if not captured:
                    raise FieldMismatchError(
                        self.source, f"empty value for key {key.name!r}"
                    )
                captures[key.name] = captured
            position = next_position
        return captures


def _final_end(value: str, position: int, delimiter: str) -> int:
    """End index of the last capture, or -1 if the trailing literal is absent."""
    if not delimiter:
        return len(value)
    if len(value) - len(delimiter) < position or not value.endswith(delimiter):
        return -1
    return len(value) - len(delimiter)


def compile_pattern(pattern: str) -> DissectPattern:
    """Compile a dissect pattern.

    Raises:
        ValueError: If the pattern has no keys, an unterminated key, two
            keys with no delimiter between them, or an append, reference or
            padding modifier.
    """
    if "%{" in _KEY.sub("", pattern):
        raise ValueError(f"unterminated key in dissect pattern {pattern!r}")
    matches = list(_KEY.finditer(pattern))
    if not matches:
        raise ValueError(f"dissect pattern {pattern!r} has no keys")

    prefix = pattern[: matches[0].start()]
    keys: list[DissectKey] = []
    for index, found in enumerate(matches):
        following = matches[index + 1].start() if index + 1 < len(matches) else len(pattern)
        delimiter = pattern[found.end() : following]
        if not delimiter and index + 1 < len(matches):
            raise ValueError(
                f"dissect pattern {pattern!r} has adjacent keys without a delimiter"
            )
        name = found.group(1).strip()
        if name.startswith(_UNSUPPORTED_MODIFIERS) or name.endswith("->"):
            raise ValueError(
                f"dissect pattern {pattern!r} uses an unsupported modifier"
                f" in key {name!r}"
            )
        if name.startswith("?"):
            name = ""
        keys.append(DissectKey(name=name, delimiter=delimiter))
    return DissectPattern(source=pattern, prefix=prefix, keys=tuple(keys))
