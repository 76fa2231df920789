"""Transform sequence encoding/decoding for storage."""

import numpy as np
from pathlib import Path
from typing import Dict, Any, Union, Optional


class TransformCodec:
    """Encode/decode recorded strip transforms and metadata to/from .npy files.

    Format: Single .npy file containing a dict with:
        - transforms: [F, N, 4] rotation_y, position_x, position_z, tilt_x per frame and strip
        - samples: [F, 4] pointer_x, pointer_y, elapsed_time, frame_delta (optional)
        - layout: [N, 4] flat_center_x, width, texture_offset_u, texture_repeat_u (optional)
        - params: dict of wall/scenario parameters
        - meta: additional metadata
    """

    VERSION = 1

    @classmethod
    def encode(
        cls,
        transforms: np.ndarray,
        samples: Optional[np.ndarray] = None,
        layout: Optional[np.ndarray] = None,
        params: Optional[Dict[str, Any]] = None,
        meta: Optional[Dict[str, Any]] = None,
        compress: bool = True,
    ) -> Dict[str, Any]:
        """Encode a transform sequence to a dict for saving.

        Args:
            transforms: [F, N, 4] per-frame strip states
            samples: [F, 4] per-frame input samples
            layout: [N, 4] static strip layout
            params: generation parameters
            meta: additional metadata
            compress: use float16 for the transforms

        Returns:
            dict ready for np.save
        """
        transforms = np.asarray(transforms)
        if transforms.ndim != 3 or transforms.shape[-1] != 4:
            raise ValueError(f"Expected [F, N, 4] transforms, got shape {transforms.shape}")
        dtype = np.float16 if compress else np.float32

        data = {
            "version": cls.VERSION,
            "transforms": transforms.astype(dtype),
        }

        # Time stamps lose too much precision in float16
        if samples is not None:
            data["samples"] = np.asarray(samples).astype(np.float64)

        if layout is not None:
            data["layout"] = np.asarray(layout).astype(np.float64)

        if params is not None:
            data["params"] = cls._serialize_params(params)

        if meta is not None:
            data["meta"] = meta

        return data

    @classmethod
    def decode(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Decode a transform sequence from a loaded dict."""
        result = {
            "transforms": data["transforms"].astype(np.float32),
        }

        if "samples" in data:
            result["samples"] = data["samples"].astype(np.float64)

        if "layout" in data:
            result["layout"] = data["layout"].astype(np.float64)

        if "params" in data:
            result["params"] = data["params"]

        if "meta" in data:
            result["meta"] = data["meta"]

        result["version"] = data.get("version", 0)

        return result

    @classmethod
    def save(cls, path: Union[str, Path], **kwargs) -> None:
        """Save transforms to .npy file."""
        data = cls.encode(**kwargs)
        np.save(path, data, allow_pickle=True)

    @classmethod
    def load(cls, path: Union[str, Path]) -> Dict[str, Any]:
        """Load transforms from .npy file."""
        data = np.load(path, allow_pickle=True).item()
        return cls.decode(data)

    @staticmethod
    def _serialize_params(params: Dict[str, Any]) -> Dict[str, Any]:
        """Serialize params to JSON-safe types."""
        serialized = {}
        for k, v in params.items():
            if isinstance(v, dict):
                serialized[k] = TransformCodec._serialize_params(v)
            elif isinstance(v, np.ndarray):
                serialized[k] = v.tolist()
            elif isinstance(v, (np.floating, np.integer)):
                serialized[k] = float(v) if isinstance(v, np.floating) else int(v)
            elif hasattr(v, "item"):
                serialized[k] = v.item()
            else:
                serialized[k] = v
        return serialized
