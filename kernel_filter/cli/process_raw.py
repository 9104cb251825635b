import os
import sys
import logging
import argparse
from pathlib import Path
from dotenv import load_dotenv

from ..models.kernel import Kernel
from ..services.convolution_service import ConvolutionService, STRATEGIES
from ..services.raster_service import RasterService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kernel-filter",
        description="Apply a 3x3 convolution kernel to a headerless RGBA8 file.",
    )
    parser.add_argument("input", type=Path, help="raw RGBA8 file, row-major")
    parser.add_argument("--width", type=int, required=True)
    parser.add_argument("--height", type=int, required=True)
    parser.add_argument("--kernel", type=float, nargs=9, required=True, metavar="W",
                        help="nine weights, row-major")
    parser.add_argument("--multiplier", type=float, default=1.0,
                        help="factor applied to every weight (default: 1)")
    parser.add_argument("--output", type=Path, default=None,
                        help="defaults to <input>_filtered<suffix>")
    parser.add_argument("--strategy", choices=STRATEGIES, default=None,
                        help="overrides FILTER_STRATEGY")
    return parser


def default_output_path(input_path: Path) -> Path:
    return input_path.with_name(f"{input_path.stem}_filtered{input_path.suffix}")


def main(argv=None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    args = build_parser().parse_args(argv)
    output_path = args.output or default_output_path(args.input)

    try:
        kernel = Kernel.from_sequence(args.kernel).scaled(args.multiplier)
        raster_service = RasterService()
        convolution_service = ConvolutionService(strategy=args.strategy)

        raster = raster_service.load_raw(args.input, args.width, args.height)
        result = convolution_service.process(kernel, raster)
        raster_service.save_raw(result, output_path)
    except (ValueError, OSError) as err:
        logger.error(f"Could not filter {args.input}: {err}")
        return 1

    logger.info(f"Filtered {result.width}x{result.height} image written to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
