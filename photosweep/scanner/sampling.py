"""
Image sampling module for the scanner package.

Turns an asset into a small grayscale pixel buffer by asking the image
decoder for a reduced rendition and normalizing it. Every other analysis
step works on these buffers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..models import MediaAsset
from .dependencies import Image, np, _logger

if TYPE_CHECKING:
    from ..library.base import ImageDecoder


def _scale_to_8bit(img: Image.Image) -> Image.Image:
    """
    Map 16-bit and 32-bit integer grayscale onto 0-255.

    convert('L') clips these modes at 255, which turns most of a 16-bit
    image white. 'I;16' images always carry 16-bit values. 'I' images are
    only shifted when they actually use more than 8 bits.
    """
    pixels = np.asarray(img).astype(np.int64)
    if img.mode.startswith('I;16') or (pixels.size and pixels.max() > 255):
        pixels = pixels >> 8
    return Image.fromarray(np.clip(pixels, 0, 255).astype(np.uint8))


class ImageSampler:
    """
    Thin adapter over an ImageDecoder.

    Decode failures of any kind are absorbed here: `sample` returns None and
    the caller substitutes its neutral default. A failed asset never aborts
    the analysis run.
    """

    def __init__(self, decoder: ImageDecoder):
        self.decoder = decoder

    def sample(
        self,
        asset: MediaAsset,
        target_width: int,
        target_height: int,
        exact: bool = False,
    ) -> Optional[Image.Image]:
        """
        Produce a grayscale ('L' mode) sample of an asset.

        Args:
            asset: Asset to sample
            target_width: Requested width in pixels
            target_height: Requested height in pixels
            exact: Resize to exactly target_width x target_height instead of
                fitting inside the box while keeping the aspect ratio

        Returns:
            Grayscale PIL image, or None if the asset could not be decoded

        Notes:
            - Aspect-fit samples are never upscaled beyond the decoded size.
            - Exact samples are used for fingerprints, whose bit layout needs a
              fixed grid; an image smaller than the grid is stretched.
        """
        try:
            decoded = self.decoder.decode(asset, target_width, target_height)
        except Exception as e:
            _logger.debug(f"Decode failed for {asset.identifier}: {e}")
            return None

        if decoded is None:
            _logger.debug(f"Decoder returned no image for {asset.identifier}")
            return None

        try:
            if decoded.mode == 'L':
                gray = decoded.copy()
            elif decoded.mode == 'I' or decoded.mode.startswith('I;16'):
                gray = _scale_to_8bit(decoded)
            else:
                gray = decoded.convert('L')

            if exact:
                if gray.size != (target_width, target_height):
                    gray = gray.resize((target_width, target_height), Image.Resampling.LANCZOS)
            else:
                # thumbnail() only ever shrinks
                gray.thumbnail((target_width, target_height), Image.Resampling.LANCZOS)
        except (OSError, ValueError) as e:
            _logger.debug(f"Could not convert sample for {asset.identifier}: {e}")
            return None

        if gray.width == 0 or gray.height == 0:
            return None

        return gray


__all__ = ['ImageSampler']
