"""
Benchmark perspective warp and normalization performance (CPU, parallel Numba kernels).
"""

import time

import numpy as np

from pixwarp import Image, ImageSize, Perspective, normalize_mean_std, warp_perspective

WIDTH, HEIGHT = 1920, 1080
NUM_ITERATIONS = 50

print("=" * 80)
print("PERSPECTIVE WARP BENCHMARK")
print(f"Testing with {WIDTH}x{HEIGHT} RGB float32, {NUM_ITERATIONS} iterations")
print("=" * 80)

# Setup
rng = np.random.default_rng(42)
size = ImageSize(WIDTH, HEIGHT)
src = Image[3](size, rng.random(WIDTH * HEIGHT * 3, dtype=np.float32))
dst = Image[3].from_size_val(size, 0.0, dtype=np.float32)

m = (
    Perspective()
    .rotate(np.pi / 12, center=(WIDTH / 2, HEIGHT / 2))
    .matrix([1.0, 0.05, 0.0, 0.0, 1.0, 0.0, 1e-5, 2e-5, 1.0])
    .get_matrix()
)


def time_call(func, iterations=NUM_ITERATIONS):
    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func()
        times.append((time.perf_counter() - start) * 1000)
    return np.mean(times), np.std(times)


# Warmup
print("\nWarming up...")
for _ in range(3):
    warp_perspective(src, dst, m, "nearest")
    warp_perspective(src, dst, m, "bilinear")
    normalize_mean_std(src, dst, [0.5, 0.5, 0.5], [0.25, 0.25, 0.25])

print(f"Benchmarking {NUM_ITERATIONS} iterations...")
pixels = WIDTH * HEIGHT

print("\nResults:")
for mode in ("nearest", "bilinear"):
    mean_time, std_time = time_call(lambda mode=mode: warp_perspective(src, dst, m, mode))
    print(
        f"  warp ({mode:>8}): {mean_time:7.3f} ms +/- {std_time:.3f} ms "
        f"({pixels / mean_time * 1000 / 1e6:.1f}M pixels/sec)"
    )

mean_time, std_time = time_call(
    lambda: normalize_mean_std(src, dst, [0.5, 0.5, 0.5], [0.25, 0.25, 0.25])
)
print(
    f"  normalize_mean_std: {mean_time:7.3f} ms +/- {std_time:.3f} ms "
    f"({pixels / mean_time * 1000 / 1e6:.1f}M pixels/sec)"
)

# Resolution scaling
print("\n" + "=" * 80)
print("RESOLUTION SCALING (bilinear)")
print("=" * 80)

for width, height in [(320, 240), (640, 480), (1280, 720), (1920, 1080), (3840, 2160)]:
    test_size = ImageSize(width, height)
    test_src = Image[3](test_size, rng.random(width * height * 3, dtype=np.float32))
    test_dst = Image[3].from_size_val(test_size, 0.0, dtype=np.float32)

    warp_perspective(test_src, test_dst, m, "bilinear")
    test_time, _ = time_call(lambda: warp_perspective(test_src, test_dst, m, "bilinear"), 10)

    print(f"{width:>5}x{height:<5}: {test_time:>8.2f} ms ({width * height / test_time * 1000 / 1e6:>6.1f}M px/s)")

# Pipeline compilation overhead
print("\n" + "=" * 80)
print("MATRIX COMPILATION OVERHEAD")
print("=" * 80)

start = time.perf_counter()
pipeline = Perspective().scale(0.5).rotate(0.3, center=(100, 100)).translate(5, 5).compile()
compile_time = (time.perf_counter() - start) * 1000
print(f"Matrix compilation time: {compile_time:.3f} ms")

print("\n" + "=" * 80)
print("SUMMARY")
print("=" * 80)
print(f"Real-time budget at 60 FPS: 16.67 ms per {WIDTH}x{HEIGHT} frame")
print("=" * 80)
