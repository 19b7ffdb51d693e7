"""Route template compiler.

Turns a template such as ``/posts[/{year:[0-9]{4}}[/{slug}]]`` into an
anchored regular expression in four passes:

1. parameters are cut out of the template and replaced by placeholders,
2. ``[...]`` optional segments are wrapped in optional-group markers,
   innermost pair first,
3. placeholders become named groups ``(?P<name>...)`` wrapped in
   protection markers,
4. the result is split into literal text and regex constructs, the
   literal text is escaped and the constructs are kept verbatim.

Every marker is a private-use character that does not occur in the
template, so template text can never be mistaken for a construct: a
literal ``(?:`` or ``)?`` in a template is escaped like any other text.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from waypost.errors import (
    TemplateMarkerError,
    UnmatchedClosingBracketError,
    UnmatchedOpeningBracketError,
)

DEFAULT_PATTERN = r"[^/]+"

_NAME_RE = re.compile(r"\w+")
_INNERMOST_OPTIONAL_RE = re.compile(r"\[([^\[\]]*)\]")
_OPTIONAL_OPEN = "(?:"
_OPTIONAL_CLOSE = ")?"
_QUANTIFIERS = "?*+"
_PRIVATE_USE = range(0xE000, 0xF900)


@dataclass(frozen=True, slots=True)
class Markers:
    """Private-use characters the compiler writes into its working string.

    None of them occurs in the template being compiled.
    """

    placeholder: str
    optional_open: str
    optional_close: str
    protect_open: str
    protect_close: str


def choose_markers(template: str) -> Markers:
    """Pick five distinct private-use characters absent from *template*."""
    chars: list[str] = []
    for code in _PRIVATE_USE:
        char = chr(code)
        if char not in template:
            chars.append(char)
            if len(chars) == 5:
                return Markers(*chars)
    raise TemplateMarkerError(template)


@dataclass(frozen=True, slots=True)
class Parameter:
    """A ``{name}`` or ``{name:pattern}`` token cut out of a template."""

    name: str
    pattern: str

    @property
    def group(self) -> str:
        return f"(?P<{self.name}>{self.pattern})"


@dataclass(frozen=True, slots=True)
class ExtractedTemplate:
    """A template with its parameters replaced by placeholders.

    ``parameters`` maps placeholder -> Parameter in declaration order.
    ``spans`` holds the ``(start, end)`` offsets of each parameter token
    in the original template.
    """

    skeleton: str
    parameters: dict[str, Parameter]
    spans: tuple[tuple[int, int], ...]
    markers: Markers


@dataclass(frozen=True, slots=True)
class PatternSegment:
    """A span of an assembled pattern.

    Protected segments are regex constructs and are emitted verbatim;
    the rest is literal text and gets escaped.
    """

    text: str
    protected: bool = False


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """The executable form of a route template."""

    template: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]

    def match(self, path: str) -> dict[str, str] | None:
        """Match the whole of *path*.

        Returns the captured parameters, leaving out any that captured
        nothing, or ``None`` when the path does not match.
        """
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return {name: value for name, value in m.groupdict().items() if value}


def compile_pattern(template: str, default_pattern: str = DEFAULT_PATTERN) -> CompiledPattern:
    """Compile a route template.

    Raises ``UnmatchedOpeningBracketError`` / ``UnmatchedClosingBracketError``
    for unbalanced optional segments. An invalid custom subpattern
    surfaces as ``re.error``.
    """
    extracted = extract_parameters(template, default_pattern)
    markers = extracted.markers
    validate_brackets(template, extracted.spans)
    pattern = expand_optional_segments(extracted.skeleton, markers)
    pattern = _restore_parameters(pattern, extracted.parameters, markers)
    pattern = escape_pattern(pattern, markers)
    return CompiledPattern(
        template=template,
        regex=re.compile(pattern),
        param_names=tuple(p.name for p in extracted.parameters.values()),
    )


# -- Pass 1: parameters --


def extract_parameters(
    template: str,
    default_pattern: str = DEFAULT_PATTERN,
    markers: Markers | None = None,
) -> ExtractedTemplate:
    """Replace every parameter token with a unique placeholder.

    A ``{`` that does not open a well-formed ``{name}`` or
    ``{name:pattern}`` token is left alone as literal text.
    """
    markers = markers or choose_markers(template)
    parts: list[str] = []
    parameters: dict[str, Parameter] = {}
    spans: list[tuple[int, int]] = []
    copied = 0
    start = template.find("{")

    while start != -1:
        token = _read_parameter(template, start, default_pattern)
        if token is None:
            start = template.find("{", start + 1)
            continue

        end, parameter = token
        placeholder = f"{markers.placeholder}{len(parameters)}{markers.placeholder}"
        parts.append(template[copied:start])
        parts.append(placeholder)
        parameters[placeholder] = parameter
        spans.append((start, end))
        copied = end
        start = template.find("{", end)

    parts.append(template[copied:])
    return ExtractedTemplate(
        skeleton="".join(parts),
        parameters=parameters,
        spans=tuple(spans),
        markers=markers,
    )


def _read_parameter(
    template: str, start: int, default_pattern: str
) -> tuple[int, Parameter] | None:
    """Read the parameter token opening at *start*.

    Returns ``(end, parameter)`` or ``None`` if the brace opens no token.
    Braces inside a custom pattern nest, so ``{code:[a-z]{2}}`` reads as
    one token.
    """
    name_match = _NAME_RE.match(template, start + 1)
    if name_match is None:
        return None

    name = name_match.group()
    cursor = name_match.end()
    if cursor >= len(template):
        return None
    if template[cursor] == "}":
        return cursor + 1, Parameter(name, default_pattern)
    if template[cursor] != ":":
        return None

    depth = 0
    index = cursor + 1
    while index < len(template):
        char = template[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                pattern = template[cursor + 1 : index]
                return index + 1, Parameter(name, pattern or default_pattern)
            depth -= 1
        index += 1
    return None


# -- Pass 2: optional segments --


def validate_brackets(template: str, ignore: Sequence[tuple[int, int]] = ()) -> None:
    """Check that every ``[`` has a matching ``]`` and vice versa.

    *ignore* lists ``(start, end)`` spans (parameter tokens, in order)
    whose brackets belong to a regex character class and are skipped.
    Positions in the raised errors are offsets into *template*.
    """
    opened: list[int] = []
    spans = iter(ignore)
    span = next(spans, None)
    index = 0

    while index < len(template):
        if span is not None and index == span[0]:
            index = span[1]
            span = next(spans, None)
            continue

        char = template[index]
        if char == "[":
            opened.append(index)
        elif char == "]":
            if not opened:
                raise UnmatchedClosingBracketError(template, index)
            opened.pop()
        index += 1

    if opened:
        raise UnmatchedOpeningBracketError(template, opened[-1])


def expand_optional_segments(pattern: str, markers: Markers) -> str:
    """Wrap the content of each ``[X]`` in optional-group markers.

    Resolves the innermost pairs first, so nesting compiles inside-out.
    Expects balanced brackets; see ``validate_brackets``.
    """
    count = 1
    while count:
        pattern, count = _INNERMOST_OPTIONAL_RE.subn(
            lambda m: f"{markers.optional_open}{m.group(1)}{markers.optional_close}",
            pattern,
        )
    return pattern


# -- Pass 3: parameter groups --


def _restore_parameters(
    pattern: str, parameters: dict[str, Parameter], markers: Markers
) -> str:
    for placeholder, parameter in parameters.items():
        pattern = pattern.replace(
            placeholder, f"{markers.protect_open}{parameter.group}{markers.protect_close}"
        )
    return pattern


# -- Pass 4: escaping --


def tokenize_pattern(pattern: str, markers: Markers) -> list[PatternSegment]:
    """Split an assembled pattern into literal and protected segments.

    Protected segments are:

    - a named group between the protection markers, plus a directly
      following ``?``, ``*`` or ``+``,
    - ``(?:`` for each optional-open marker and ``)?`` for each
      optional-close marker.

    Everything else, including text inside optional segments, is literal.
    """
    segments: list[PatternSegment] = []
    literal: list[str] = []
    index = 0

    def flush() -> None:
        if literal:
            segments.append(PatternSegment("".join(literal)))
            literal.clear()

    while index < len(pattern):
        char = pattern[index]
        if char == markers.protect_open:
            end = pattern.index(markers.protect_close, index)
            construct = pattern[index + 1 : end]
            end += 1
            if end < len(pattern) and pattern[end] in _QUANTIFIERS:
                construct += pattern[end]
                end += 1
            flush()
            segments.append(PatternSegment(construct, protected=True))
            index = end
            continue

        if char == markers.optional_open:
            flush()
            segments.append(PatternSegment(_OPTIONAL_OPEN, protected=True))
        elif char == markers.optional_close:
            flush()
            segments.append(PatternSegment(_OPTIONAL_CLOSE, protected=True))
        else:
            literal.append(char)
        index += 1

    flush()
    return segments


def escape_pattern(pattern: str, markers: Markers) -> str:
    """Escape the literal text of *pattern*, keeping regex constructs intact."""
    return "".join(
        segment.text if segment.protected else re.escape(segment.text)
        for segment in tokenize_pattern(pattern, markers)
    )
