#!/usr/bin/env python3
"""Render a scene.v1 YAML file to a text pixmap (and optional PNG preview).

Usage:
    python scripts/render_scene.py --scene scenes/sun.yaml
    python scripts/render_scene.py --scene scenes/sun.yaml --verbose --metadata

Outputs (paths come from the scene's `output` block):
    - <output.ppm>: canonical ASCII pixmap
    - <output.png>: 8-bit preview, if configured
    - <output.ppm stem>.metadata.yaml: render metadata (with --metadata)

Exit codes:
    0 success, 1 invalid scene or render failure
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from src.pixmap import scene as scene_mod
from src.pixmap.errors import PixmapError
from src.utils import fs, logging_config, validators


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene.v1 YAML file to an ASCII pixmap",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--scene',
        type=str,
        required=True,
        help='Path to scene.v1 YAML file'
    )
    parser.add_argument(
        '--metadata',
        action='store_true',
        help='Also write <ppm stem>.metadata.yaml next to the pixmap'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging (overrides the scene logging level)'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Console logging first so validation errors are reported
    logging_config.setup_logging(log_level="DEBUG" if args.verbose else "INFO",
                                 context={"app": "render"})
    logger = logging.getLogger(__name__)

    try:
        scene = validators.load_scene(args.scene)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    log_cfg = scene.logging
    logging_config.setup_logging(
        log_level="DEBUG" if args.verbose else log_cfg.level,
        log_file=log_cfg.file,
        json=log_cfg.json_lines,
        context={"scene": Path(args.scene).stem}
    )

    start_time = time.time()
    try:
        buffer = scene_mod.render_scene(scene)
        written = scene_mod.write_outputs(buffer, scene.output)
    except (PixmapError, RuntimeError, ValueError) as e:
        logger.error(f"Render failed: {e}")
        return 1
    render_time = time.time() - start_time

    logger.info(f"Rendering completed in {render_time:.3f}s")

    if args.metadata:
        ppm_path = Path(scene.output.ppm)
        meta_path = ppm_path.with_name(ppm_path.stem + ".metadata.yaml")
        fs.atomic_yaml_dump({
            'scene': str(args.scene),
            'size_px': [buffer.width, buffer.height],
            'max_value': buffer.max_value,
            'num_ops': len(scene.ops),
            'render_time_s': float(render_time),
            'outputs': written,
        }, meta_path)
        logger.info(f"Saved metadata: {meta_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
