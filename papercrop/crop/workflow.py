"""Crop workflow state machine with background detection.

    idle -> detecting -> suggested | manual -> adjusting -> confirmed
                                               adjusting <- confirmed

Any state may be cancelled back to idle. Detection runs on an executor;
each start() takes a new generation token and a finished detection whose
token is no longer current is dropped without touching the session.
A scan that is already running cannot be interrupted, so the private
pool keeps a second worker free for the image that replaced it.
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from enum import Enum
from typing import Optional, Tuple

from ..config import CropperConfig, DetectionConfig, OutputConfig
from ..core.io import ImageSource, LoadError, PixelBuffer, load_image
from ..detection.base import CropArea, DetectionResult
from ..detection.paper import PaperDetector
from .adapter import (
    CropperView,
    PixelCrop,
    crop_area_to_view,
    pixel_crop_to_crop_area,
    reset_view,
    view_to_pixel_crop,
)
from .render import CroppedImage, create_cropped_image

logger = logging.getLogger(__name__)

MANUAL_MESSAGE = "Could not detect paper. Please crop manually."
DETECTION_FAILED_MESSAGE = "Detection failed. Please crop manually."
LOAD_FAILED_MESSAGE = "Could not load the image."


class CropState(Enum):
    IDLE = "idle"
    DETECTING = "detecting"
    SUGGESTED = "suggested"
    MANUAL = "manual"
    ADJUSTING = "adjusting"
    CONFIRMED = "confirmed"


TRANSITIONS = {
    CropState.IDLE: {CropState.DETECTING},
    CropState.DETECTING: {CropState.SUGGESTED, CropState.MANUAL},
    CropState.SUGGESTED: {CropState.ADJUSTING},
    CropState.MANUAL: {CropState.ADJUSTING},
    CropState.ADJUSTING: {CropState.CONFIRMED},
    CropState.CONFIRMED: {CropState.ADJUSTING},
}


class InvalidTransitionError(RuntimeError):
    """Raised on a workflow transition that is not allowed."""


class CropSession:
    """One image's trip from upload to confirmed crop.

    Attributes:
        state: Current workflow state.
        result: Detection result of the current image, once known.
        view: Current cropper pan/zoom.
        message: User-facing status line.
        confirmed_area: Crop area accepted by the user.
    """

    def __init__(
        self,
        detection: Optional[DetectionConfig] = None,
        cropper: Optional[CropperConfig] = None,
        executor: Optional[Executor] = None,
    ):
        """Initialize the session.

        Args:
            detection: Detection parameters.
            cropper: Cropper zoom limits.
            executor: Executor for detection; a private two-thread pool
                is created when omitted.
        """
        self.detector = PaperDetector(detection)
        self.cropper = cropper or CropperConfig()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2)
        self._lock = threading.Lock()
        self._generation = 0
        self._future: Optional[Future] = None
        self._clear()

    def _clear(self) -> None:
        self.state = CropState.IDLE
        self.result: Optional[DetectionResult] = None
        self.view: Optional[CropperView] = None
        self.message = ""
        self.confirmed_area: Optional[CropArea] = None
        self._buffer: Optional[PixelBuffer] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def image_size(self) -> Optional[Tuple[int, int]]:
        """(width, height) of the current image, None until decoded."""
        if self._buffer is None:
            return None
        return self._buffer.width, self._buffer.height

    def _transition(self, new_state: CropState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Cannot go from {self.state.value} to {new_state.value}"
            )
        self.state = new_state

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._future is not None:
            self._future.cancel()
            self._future = None
        self._clear()

    def start(self, source: ImageSource) -> "Future[DetectionResult]":
        """Begin detection for a new image, replacing any previous one.

        Args:
            source: Data URI or encoded image bytes.

        Returns:
            Future resolving to the DetectionResult, or raising LoadError.
        """
        with self._lock:
            self._cancel_locked()
            self._transition(CropState.DETECTING)
            token = self._generation
            future = self._executor.submit(self._run, token, source)
            self._future = future
        return future

    def _run(self, token: int, source: ImageSource) -> DetectionResult:
        try:
            buffer = load_image(source)
        except LoadError:
            with self._lock:
                if token == self._generation:
                    self._clear()
                    self.message = LOAD_FAILED_MESSAGE
                    self._future = None
            raise

        result = self.detector.detect(buffer)
        with self._lock:
            if token != self._generation:
                logger.debug(
                    "Discarding stale detection (generation %d, current %d)",
                    token,
                    self._generation,
                )
                return result
            self._buffer = buffer
            self.result = result
            self.view = crop_area_to_view(
                result.crop_area, buffer.width, buffer.height, self.cropper
            )
            if result.detected:
                self._transition(CropState.SUGGESTED)
                self.message = (
                    f"Paper detected ({result.confidence:.0%} confidence). "
                    "Adjust the crop if needed."
                )
            else:
                self._transition(CropState.MANUAL)
                self.message = DETECTION_FAILED_MESSAGE if result.failed else MANUAL_MESSAGE
        return result

    def cancel(self) -> None:
        """Drop the current image and any in-flight detection."""
        with self._lock:
            self._cancel_locked()

    def begin_adjusting(self, view: Optional[CropperView] = None) -> CropperView:
        """Hand the crop to the user for adjustment.

        Args:
            view: Starting view; defaults to the suggested one.

        Returns:
            The view now in effect.
        """
        with self._lock:
            self._transition(CropState.ADJUSTING)
            if view is not None:
                self.view = view
            return self.view

    def update_view(self, view: CropperView) -> None:
        """Record a pan/zoom change made by the user."""
        with self._lock:
            if self.state is not CropState.ADJUSTING:
                raise InvalidTransitionError(f"Cannot adjust while {self.state.value}")
            self.view = view

    def reset_view(self) -> CropperView:
        """Show the whole image again, unzoomed."""
        with self._lock:
            if self.state is not CropState.ADJUSTING:
                raise InvalidTransitionError(f"Cannot reset while {self.state.value}")
            width, height = self.image_size
            self.view = reset_view(width, height)
            return self.view

    def confirm(self, pixel_crop: Optional[PixelCrop] = None) -> CropArea:
        """Accept the crop.

        Args:
            pixel_crop: Rectangle reported by the cropper; computed from
                the current view when omitted.

        Returns:
            Confirmed crop area in percentages.
        """
        with self._lock:
            self._transition(CropState.CONFIRMED)
            width, height = self.image_size
            if pixel_crop is None:
                pixel_crop = view_to_pixel_crop(self.view, width, height)
            self.confirmed_area = pixel_crop_to_crop_area(pixel_crop, width, height)
            return self.confirmed_area

    def render(self, config: Optional[OutputConfig] = None) -> CroppedImage:
        """Encode the confirmed crop."""
        with self._lock:
            if self.state is not CropState.CONFIRMED:
                raise InvalidTransitionError(f"Cannot render while {self.state.value}")
            buffer, area = self._buffer, self.confirmed_area
        return create_cropped_image(buffer, area, config)

    def close(self) -> None:
        """Cancel work and release the private executor."""
        self.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
