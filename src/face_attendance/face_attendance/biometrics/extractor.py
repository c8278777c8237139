from __future__ import annotations

import importlib
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Union

import cv2
import numpy as np

from ..core.constants import EMBEDDING_DIMENSION
from ..core.exceptions import ExtractionUnavailable, InternalError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoFaceFound:
    """Normal extraction outcome: the image holds no detectable face."""

    reason: str = "no face detected"


NO_FACE = NoFaceFound()

ExtractionResult = Union[np.ndarray, NoFaceFound]


class FaceExtractor(Protocol):
    def ensure_loaded(self) -> None:
        raise NotImplementedError

    def extract(self, image: bytes) -> ExtractionResult:
        raise NotImplementedError


def _import_face_recognition() -> Any:
    # Importing face_recognition loads the dlib detector/landmark/encoder weights.
    return importlib.import_module("face_recognition")


def decode_image(image: bytes) -> np.ndarray:
    """Decode PNG/JPEG/... bytes into a contiguous RGB uint8 array.

    IMREAD_COLOR yields 8-bit BGR for any depth or channel count and applies
    the EXIF orientation tag.
    """
    arr = np.frombuffer(image, np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_COLOR)
    if img is None:
        raise ValidationError("Invalid image")

    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    return np.ascontiguousarray(rgb, dtype=np.uint8)


class FaceRecognitionExtractor(FaceExtractor):
    """dlib/face_recognition backed 128-d embedding extractor.

    The model is loaded once per process. The first caller performs the load;
    callers arriving meanwhile block on the same lock and then observe the
    finished engine instead of starting another load. A failed load is not
    cached, so a later call may retry it.
    """

    def __init__(
        self,
        *,
        detection_model: str = "hog",
        upsample: int = 1,
        num_jitters: int = 1,
        loader: Optional[Callable[[], Any]] = None,
    ):
        self._detection_model = detection_model
        self._upsample = int(upsample)
        self._num_jitters = int(num_jitters)
        self._loader = loader or _import_face_recognition
        self._engine: Any = None
        self._load_lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._engine is not None

    def ensure_loaded(self) -> None:
        if self._engine is not None:
            return
        with self._load_lock:
            if self._engine is not None:
                return
            logger.info("Loading face recognition models...")
            try:
                engine = self._loader()
            except Exception as e:
                logger.error("Failed to load face recognition models: %s", e)
                raise ExtractionUnavailable() from e
            self._engine = engine
            logger.info("Face recognition models loaded.")

    def extract(self, image: bytes) -> ExtractionResult:
        self.ensure_loaded()
        rgb = decode_image(image)

        try:
            boxes = self._engine.face_locations(
                rgb, number_of_times_to_upsample=self._upsample, model=self._detection_model
            )
            if not boxes:
                return NO_FACE
            encodings = self._engine.face_encodings(rgb, boxes[:1], num_jitters=self._num_jitters)
        except Exception as e:
            raise InternalError("Face extraction failed") from e

        if not encodings:
            return NO_FACE

        embedding = np.asarray(encodings[0], dtype=np.float64)
        if embedding.shape != (EMBEDDING_DIMENSION,):
            raise InternalError(f"Unexpected embedding shape {embedding.shape}")
        return embedding
