"""Run coordination for the decode -> binarize -> trace pipeline.

Every conversion attempt gets a token from a monotonically increasing
counter. An attempt may only publish results, surface errors or clear
the busy flag while its token is still the latest one; a superseded
attempt runs to completion but discards what it produced.
"""
import asyncio
import inspect
import logging
from pathlib import Path
from typing import Callable, Optional, Set, Union

from traceify.binarize import make_bw_mask, mask_coverage
from traceify.raster_ingest import decode_image
from traceify.rasterize import encode_png
from traceify.resources import ResourceStore
from traceify.session import (
    AttemptFailed,
    AttemptStarted,
    AttemptSucceeded,
    FileSelected,
    RunOutputs,
    SessionState,
    SettingChanged,
    reduce,
)
from traceify.svg_export import save_svg
from traceify.tracer import PotraceTracer, get_tracer_options
from traceify.types import ConverterConfig, NoOutputError, Preset, RunResult

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "Something went wrong."
MASK_MEDIA_TYPE = "image/png"
SVG_MEDIA_TYPE = "image/svg+xml"


class RunCoordinator:
    """
    Owns the session state and sequences conversion attempts.

    All methods must be called from the event loop that runs the
    attempts. Decoder, rasterizer and tracer may be plain callables
    (run in a worker thread) or coroutine functions.
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        decoder: Optional[Callable] = None,
        rasterizer: Optional[Callable] = None,
        tracer: Optional[Callable] = None,
        resources: Optional[ResourceStore] = None,
    ):
        """
        Initialize coordinator.

        Args:
            config: Session configuration. Uses defaults if None.
            decoder: bytes -> PixelBuffer
            rasterizer: PixelBuffer -> PNG bytes
            tracer: (mask, TracerOptions) -> SVG string
            resources: Store for displayed resources
        """
        self.config = config or ConverterConfig()
        self.decoder = decoder or decode_image
        self.rasterizer = rasterizer or encode_png
        self.tracer = tracer or PotraceTracer()
        self.resources = resources or ResourceStore()

        self.state = SessionState(
            threshold=self.config.threshold,
            auto_invert=self.config.auto_invert,
            flip_invert=self.config.flip_invert,
            preset=self.config.preset,
            auto_run=self.config.auto_run,
        )
        self.attempts_started = 0

        self._latest_token = 0
        self._debounce_task: Optional[asyncio.Task] = None
        self._attempts: Set[asyncio.Task] = set()

    # Read paths

    @property
    def latest_token(self) -> int:
        return self._latest_token

    @property
    def busy(self) -> bool:
        return self.state.busy

    @property
    def outputs(self) -> RunOutputs:
        return self.state.outputs

    @property
    def error(self) -> Optional[str]:
        return self.state.outputs.error

    @property
    def debounce_pending(self) -> bool:
        return self._debounce_task is not None and not self._debounce_task.done()

    def is_latest(self, token: int) -> bool:
        return token == self._latest_token

    # User controls

    def select_file(self, payload: Optional[bytes], name: Optional[str] = None) -> None:
        """Load a new source file, dropping every displayed result."""
        event = FileSelected(payload=payload, name=name)
        self._require_loop(reduce(self.state, event))
        self._release_outputs()
        self._dispatch(event)
        self._on_trigger()

    def set_threshold(self, threshold: int) -> None:
        self._change_setting("threshold", threshold)

    def set_auto_invert(self, enabled: bool) -> None:
        self._change_setting("auto_invert", enabled)

    def set_flip_invert(self, enabled: bool) -> None:
        self._change_setting("flip_invert", enabled)

    def set_preset(self, preset: Union[str, Preset]) -> None:
        self._change_setting("preset", preset)

    def set_auto_run(self, enabled: bool) -> None:
        self._change_setting("auto_run", enabled)

    async def vectorize(self) -> Optional[RunResult]:
        """
        Start an attempt immediately, bypassing the debounce window.

        Returns:
            The attempt's result if it was published, else None
            (no file loaded, superseded, or failed)
        """
        task = self._start_attempt()
        if task is None:
            return None
        return await task

    def svg_document(self) -> str:
        """
        Return the current vector output.

        Raises:
            NoOutputError: If no vector output is displayed
        """
        handle = self.state.outputs.svg
        if handle is None:
            raise NoOutputError("No SVG output to export")
        return self.resources.read(handle).decode("utf-8")

    def download_svg(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write the current vector output to a file.

        Args:
            output_path: Target file (default: config.download_filename)

        Returns:
            Path written

        Raises:
            NoOutputError: If no vector output is displayed
        """
        path = Path(output_path or self.config.download_filename)
        save_svg(self.svg_document(), str(path))
        logger.info(f"SVG exported to {path}")
        return path

    async def wait_idle(self) -> None:
        """Wait until no debounce timer is pending and no attempt is running."""
        while self._debounce_task is not None or self._attempts:
            if self._debounce_task is not None:
                await asyncio.gather(self._debounce_task, return_exceptions=True)
                if self._debounce_task is not None and self._debounce_task.done():
                    self._debounce_task = None
            if self._attempts:
                await asyncio.gather(*list(self._attempts), return_exceptions=True)

    def close(self) -> None:
        """Cancel any pending debounce and release displayed resources."""
        self._cancel_debounce()
        self._release_outputs()
        self._dispatch(FileSelected(payload=None))

    # Triggers

    def _change_setting(self, name: str, value) -> None:
        new_state = reduce(self.state, SettingChanged(name=name, value=value))
        if new_state == self.state:
            return
        self._require_loop(new_state)
        self.state = new_state
        self._on_trigger()

    def _require_loop(self, state: SessionState) -> None:
        """
        Check that an auto-run for `state` could be scheduled.

        Raises:
            RuntimeError: If auto-run would start but no event loop is running
        """
        if not (state.auto_run and state.has_file):
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError(
                "Auto-run needs a running event loop; call from a coroutine "
                "or disable auto_run"
            ) from None

    def _on_trigger(self) -> None:
        # A pending timer always restarts on a new trigger
        self._cancel_debounce()
        if not (self.state.auto_run and self.state.has_file):
            return

        loop = asyncio.get_running_loop()
        self._debounce_task = loop.create_task(self._fire_after_debounce())

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
            logger.debug("Pending auto-run cancelled")
        self._debounce_task = None

    async def _fire_after_debounce(self) -> None:
        """Wait for the quiet period, then start an attempt."""
        await asyncio.sleep(self.config.debounce_seconds)
        self._debounce_task = None
        self._start_attempt()

    # Attempts

    def _start_attempt(self) -> Optional[asyncio.Task]:
        if not self.state.has_file:
            return None

        self._latest_token += 1
        token = self._latest_token
        self.attempts_started += 1
        snapshot = self.state
        self._dispatch(AttemptStarted(token=token))
        logger.debug(f"Run {token} started")

        task = asyncio.get_running_loop().create_task(self._run_attempt(token, snapshot))
        self._attempts.add(task)
        task.add_done_callback(self._attempts.discard)
        return task

    async def _run_attempt(self, token: int, snapshot: SessionState) -> Optional[RunResult]:
        """Run one attempt against a frozen copy of the settings."""
        mask_handle = None
        svg_handle = None
        published = False

        try:
            source = await self._call(self.decoder, snapshot.source)

            mask = make_bw_mask(
                source,
                snapshot.threshold,
                snapshot.flags,
                alpha_cutoff=self.config.alpha_cutoff,
                divisions=self.config.border_divisions,
                dark_cutoff=self.config.dark_cutoff,
            )
            coverage = mask_coverage(mask)

            mask_png = await self._call(self.rasterizer, mask)
            mask_handle = self.resources.create(mask_png, MASK_MEDIA_TYPE)

            options = get_tracer_options(snapshot.preset)
            svg = await self._call(self.tracer, mask, options)

            # Stale-run guard
            if not self.is_latest(token):
                logger.debug(f"Run {token} superseded by run {self._latest_token}, discarding")
                return None

            svg_handle = self.resources.create(svg.encode("utf-8"), SVG_MEDIA_TYPE)
            self._release_outputs()
            self._dispatch(AttemptSucceeded(token=token, mask=mask_handle, svg=svg_handle))
            published = True

            logger.info(
                f"Run {token} published: {mask.width}x{mask.height}, "
                f"coverage={coverage:.1%}, preset={snapshot.preset.value}"
            )
            return RunResult(
                token=token,
                mask=mask,
                mask_png=mask_png,
                svg=svg,
                coverage=coverage,
            )

        except asyncio.CancelledError:
            if self.is_latest(token):
                self._dispatch(AttemptFailed(token=token, message="Run cancelled"))
            raise
        except Exception as e:
            if not self.is_latest(token):
                logger.debug(f"Run {token} failed after being superseded: {e}")
                return None
            message = str(e) or DEFAULT_ERROR
            logger.warning(f"Run {token} failed: {message}")
            self._dispatch(AttemptFailed(token=token, message=message))
            return None
        finally:
            if not published:
                self.resources.revoke(mask_handle)
                self.resources.revoke(svg_handle)

    async def _call(self, func: Callable, *args):
        if inspect.iscoroutinefunction(func) or inspect.iscoroutinefunction(
            getattr(func, "__call__", None)
        ):
            return await func(*args)
        return await asyncio.to_thread(func, *args)

    # State

    def _dispatch(self, event) -> None:
        self.state = reduce(self.state, event)

    def _release_outputs(self) -> None:
        outputs = self.state.outputs
        self.resources.revoke(outputs.mask)
        self.resources.revoke(outputs.svg)
