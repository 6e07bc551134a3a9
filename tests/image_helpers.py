"""
Image builders and decoders shared by the tests
"""

from io import BytesIO

import cv2
import numpy as np
from PIL import Image

# Common locations of a TrueType font on test machines
FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
]


def make_image(width, height, color=(0, 0, 255, 255)):
    """Create a solid BGRA buffer (red by default)"""
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[:] = color
    return image


def encode_png(image):
    success, buffer = cv2.imencode(".png", image)
    assert success
    return buffer.tobytes()


def encode_jpeg(image, quality=95):
    success, buffer = cv2.imencode(".jpg", image[..., :3], [cv2.IMWRITE_JPEG_QUALITY, quality])
    assert success
    return buffer.tobytes()


def jpeg_with_orientation(width, height, orientation):
    """Encode a JPEG carrying an EXIF orientation tag"""
    img = Image.new("RGB", (width, height), (255, 0, 0))
    # Mark the top-left corner so orientation changes are observable
    img.paste((0, 0, 255), (0, 0, width // 4, height // 4))
    exif = Image.Exif()
    exif[274] = orientation
    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=95, exif=exif)
    return buffer.getvalue()


def decode_bytes(data):
    """Decode encoded bytes for assertions"""
    return cv2.imdecode(np.frombuffer(data, np.uint8), cv2.IMREAD_UNCHANGED)


def png_with_orientation(width, height, orientation):
    """Encode a lossless PNG with an eXIf orientation chunk and distinct pixels"""
    ys, xs = np.mgrid[0:height, 0:width]
    rgba = np.zeros((height, width, 4), dtype=np.uint8)
    rgba[..., 0] = (xs * 255 // max(width - 1, 1)).astype(np.uint8)
    rgba[..., 1] = (ys * 255 // max(height - 1, 1)).astype(np.uint8)
    rgba[..., 2] = 128
    rgba[..., 3] = 255
    exif = Image.Exif()
    exif[274] = orientation
    buffer = BytesIO()
    Image.fromarray(rgba).save(buffer, format="PNG", exif=exif)
    return buffer.getvalue()
