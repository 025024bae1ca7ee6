"""
Example: image warping and normalization usage.

Demonstrates how to use pixwarp for:
- Converting 8-bit images to float
- Mean/std and min/max normalization
- Perspective warping with nearest and bilinear sampling
- Composing transforms with the Perspective pipeline
- Sending images as binary messages
"""

import logging

import numpy as np

from pixwarp import (
    Image,
    ImageMsg,
    ImageSize,
    Perspective,
    WarpConfig,
    cast_and_scale,
    find_min_max,
    gray_from_rgb,
    normalize_mean_std,
    normalize_min_max,
    warp_perspective,
)

# Configure logging to see per-operation messages
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def generate_sample_image(width: int = 64, height: int = 48) -> Image:
    """Generate a synthetic 8-bit RGB gradient for demonstration."""
    xx, yy = np.meshgrid(np.linspace(0, 255, width), np.linspace(0, 255, height))
    rgb = np.stack([xx, yy, 255 - xx], axis=2).astype(np.uint8)
    return Image.from_array(rgb)


def example_1_cast_and_normalize():
    """Example 1: u8 -> f32 in [0, 1], then standardize."""
    print("\n" + "=" * 70)
    print("EXAMPLE 1: Cast and Normalize")
    print("=" * 70)

    image = generate_sample_image()
    as_float = Image[3].from_size_val(image.size, 0.0, dtype=np.float32)
    cast_and_scale(image, as_float, 1.0 / 255.0)
    print(f"Converted: {as_float!r}, range {find_min_max(as_float)}")

    standardized = Image[3].from_size_val(image.size, 0.0, dtype=np.float32)
    normalize_mean_std(as_float, standardized, [0.485, 0.456, 0.406], [0.229, 0.224, 0.225])
    print(f"Standardized mean: {float(standardized.mean()):.3f}")

    rescaled = Image[3].from_size_val(image.size, 0.0, dtype=np.float32)
    normalize_min_max(standardized, rescaled, -1.0, 1.0)
    print(f"Rescaled range: {find_min_max(rescaled)}")


def example_2_warp_perspective():
    """Example 2: direct perspective warp into a smaller destination."""
    print("\n" + "=" * 70)
    print("EXAMPLE 2: Perspective Warp")
    print("=" * 70)

    image = generate_sample_image().cast(np.float32)
    dst = Image[3].from_size_val(ImageSize(32, 24), 0.0, dtype=np.float32)

    # Half-size resize with a slight keystone
    m = [0.5, 0.0, 0.0, 0.0, 0.5, 0.0, 0.0, 0.002, 1.0]
    for mode in ("nearest", "bilinear"):
        warp_perspective(image, dst, m, mode)
        print(f"{mode:>8}: top-left {dst.get_pixel(0, 0, 0):.1f}, bottom-right {dst.get_pixel(31, 23, 0):.1f}")


def example_3_pipeline():
    """Example 3: compose a rotation, flip and translation."""
    print("\n" + "=" * 70)
    print("EXAMPLE 3: Perspective Pipeline")
    print("=" * 70)

    image = generate_sample_image().cast(np.float32)
    pipeline = (
        Perspective(WarpConfig(interpolation="bilinear", fill_value=0.0))
        .rotate(np.pi / 6, center=(image.width / 2, image.height / 2))
        .flip_horizontal(image.width)
        .translate(4, 0)
    )
    print(pipeline)

    warped = pipeline(image)
    print(f"Warped: {warped!r}")
    print(f"Matrix:\n{pipeline.get_matrix().reshape(3, 3)}")


def example_4_gray_and_messages():
    """Example 4: grayscale conversion and binary round trip."""
    print("\n" + "=" * 70)
    print("EXAMPLE 4: Grayscale and Messages")
    print("=" * 70)

    image = generate_sample_image()
    gray = Image[1].from_size_val(image.size, 0, dtype=np.uint8)
    gray_from_rgb(image, gray)

    payload = ImageMsg(gray).encode()
    restored = ImageMsg.decode(payload, Image[1], np.uint8)
    print(f"Encoded {restored!r} into {len(payload)} bytes, identical: {restored.image == gray}")


if __name__ == "__main__":
    example_1_cast_and_normalize()
    example_2_warp_perspective()
    example_3_pipeline()
    example_4_gray_and_messages()
