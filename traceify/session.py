"""Session state record and its transition function.

The run coordinator is the only caller of `reduce`; everything else
reads the state it publishes.
"""
from dataclasses import dataclass, replace
from typing import Optional, Union

from traceify.resources import ResourceHandle
from traceify.types import Preset, PolarityFlags, RunStatus, validate_threshold


@dataclass(frozen=True)
class RunOutputs:
    """Displayed results: mask preview and vector output, or an error."""
    mask: Optional[ResourceHandle] = None
    svg: Optional[ResourceHandle] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class SessionState:
    """Everything the user can see or set."""
    source: Optional[bytes] = None
    source_name: Optional[str] = None
    threshold: int = 140
    auto_invert: bool = True
    flip_invert: bool = False
    preset: Preset = Preset.SHARP
    auto_run: bool = True
    busy: bool = False
    status: RunStatus = RunStatus.IDLE
    outputs: RunOutputs = RunOutputs()

    @property
    def flags(self) -> PolarityFlags:
        return PolarityFlags(auto_invert=self.auto_invert, flip_invert=self.flip_invert)

    @property
    def has_file(self) -> bool:
        return self.source is not None


# Events

@dataclass(frozen=True)
class FileSelected:
    payload: Optional[bytes]
    name: Optional[str] = None


@dataclass(frozen=True)
class SettingChanged:
    name: str
    value: object


@dataclass(frozen=True)
class AttemptStarted:
    token: int


@dataclass(frozen=True)
class AttemptSucceeded:
    token: int
    mask: ResourceHandle
    svg: ResourceHandle


@dataclass(frozen=True)
class AttemptFailed:
    token: int
    message: str


Event = Union[FileSelected, SettingChanged, AttemptStarted, AttemptSucceeded, AttemptFailed]

SETTINGS = ("threshold", "auto_invert", "flip_invert", "preset", "auto_run")


def reduce(state: SessionState, event: Event) -> SessionState:
    """
    Apply one event to the session state.

    Releasing superseded resource handles is the caller's job; this
    function only decides which handles are current.

    Raises:
        ValueError: On an unknown setting or an invalid value
        TypeError: On an unknown event
    """
    if isinstance(event, FileSelected):
        # A new file clears previous results, including errors
        return replace(
            state,
            source=event.payload,
            source_name=event.name,
            outputs=RunOutputs(),
        )

    if isinstance(event, SettingChanged):
        if event.name not in SETTINGS:
            raise ValueError(f"Unknown setting: {event.name}")
        value = event.value
        if event.name == "threshold":
            value = validate_threshold(value)
        elif event.name == "preset":
            value = Preset.parse(value)
        elif not isinstance(value, bool):
            raise ValueError(f"{event.name} must be True or False, got {value!r}")
        return replace(state, **{event.name: value})

    if isinstance(event, AttemptStarted):
        return replace(
            state,
            busy=True,
            status=RunStatus.RUNNING,
            outputs=replace(state.outputs, error=None),
        )

    if isinstance(event, AttemptSucceeded):
        return replace(
            state,
            busy=False,
            status=RunStatus.SUCCEEDED,
            outputs=RunOutputs(mask=event.mask, svg=event.svg),
        )

    if isinstance(event, AttemptFailed):
        # Previously displayed outputs stay on screen
        return replace(
            state,
            busy=False,
            status=RunStatus.FAILED,
            outputs=replace(state.outputs, error=event.message),
        )

    raise TypeError(f"Unknown event: {event!r}")
