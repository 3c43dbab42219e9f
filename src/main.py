# main.py
import argparse
import logging
import os
import sys
from typing import List, Optional
from core.utils import seed_thread_rng
from renderer.config import RenderConfig
from renderer.raytracer import render_scene
from scenes import SCENES, get_scene, model

def setup_logging(level: str = "INFO") -> None:
    fmt = "%(name)s [%(levelname)s] %(message)s"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt,
        stream=sys.stdout,
    )

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Multithreaded Monte Carlo path tracer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python main.py --scene cornell --width 300 --aspect-ratio 1 --samples 200\n"
            "  python main.py --scene random --threads 8 --output random.png\n"
            "  python main.py --model bunny.ply --model-scale 20\n"
            "  python main.py --scene earth --texture earthmap.ppm\n"
        ),
    )
    parser.add_argument(
        "--scene",
        type=str,
        default="random",
        choices=sorted(SCENES),
        help="Built-in scene to render (default: random)",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Render a .ply or .obj triangle model instead of a built-in scene",
    )
    parser.add_argument(
        "--model-scale",
        type=float,
        default=1.0,
        help="Uniform scale applied to --model vertices (default: 1)",
    )
    parser.add_argument(
        "--texture",
        type=str,
        default=None,
        help="Image file mapped onto the earth scene and the final scene's large sphere",
    )
    parser.add_argument("--width", type=int, default=400, help="Image width in pixels (default: 400)")
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=16.0 / 9.0,
        help="Width over height (default: 16/9)",
    )
    parser.add_argument("--samples", type=int, default=400, help="Samples per pixel (default: 400)")
    parser.add_argument("--max-depth", type=int, default=50, help="Maximum bounces per path (default: 50)")
    parser.add_argument(
        "--threads",
        type=int,
        default=os.cpu_count() or 1,
        help="Number of render threads (default: CPU count)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible renders")
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help="Output path; .png writes PNG, anything else plain PPM (default: image.ppm)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger = logging.getLogger("pathtracer")

    try:
        config = RenderConfig(
            aspect_ratio=args.aspect_ratio,
            image_width=args.width,
            samples_per_pixel=args.samples,
            max_depth=args.max_depth,
            threads=args.threads,
            seed=args.seed,
        )
    except ValueError as e:
        logger.error("Invalid render settings: %s", e)
        return 2

    if config.seed is not None:
        # Scene construction draws from the calling thread's generator too.
        seed_thread_rng(config.seed)

    try:
        if args.model:
            scene = model(config.aspect_ratio, args.model, args.model_scale)
        else:
            scene = get_scene(args.scene, config.aspect_ratio, args.texture)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Could not build scene: %s", e)
        return 1

    render_scene(scene, config, args.output)
    return 0

if __name__ == "__main__":
    sys.exit(main())
