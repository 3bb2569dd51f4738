import os
import sys
import time
import warnings

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from argparse import ArgumentParser, ArgumentTypeError

from mandelbands import (
    BACKENDS,
    DEFAULT_LIMIT,
    DEFAULT_WORKERS,
    RenderParameters,
    parse_complex,
    parse_pair,
    render_image,
    write_image,
)


def image_bounds(value: str) -> tuple[int, int]:
    bounds = parse_pair(value, "x", int)
    if bounds is None:
        raise ArgumentTypeError(f"error parsing image dimensions '{value.strip()}', expected WIDTHxHEIGHT")
    if bounds[0] <= 0 or bounds[1] <= 0:
        raise ArgumentTypeError(f"image dimensions must be positive, got '{value.strip()}'")
    return bounds


def complex_point(value: str) -> complex:
    point = parse_complex(value)
    if point is None:
        raise ArgumentTypeError(f"error parsing corner point '{value.strip()}', expected RE,IM")
    return point


def build_parser():
    parser = ArgumentParser(
        description="Render the Mandelbrot set over a window of the complex plane.",
        epilog="Example: %(prog)s mandel.png 1000x750 -1.20,0.35 -1.0,0.20",
    )

    parser.add_argument('file', metavar='FILE', help='image file to write')

    parser.add_argument('bounds', type=image_bounds, metavar='PIXELS',
                        help='image size in pixels, written WIDTHxHEIGHT (e.g. 1000x750)')

    parser.add_argument('upper_left', type=complex_point, metavar='UPPERLEFT',
                        help='complex point at the upper-left corner, written RE,IM')

    parser.add_argument('lower_right', type=complex_point, metavar='LOWERRIGHT',
                        help='complex point at the lower-right corner, written RE,IM')

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='maximum number of iterations before a point counts as bounded',
                        metavar='MAX_ITERATIONS', default=DEFAULT_LIMIT)

    parser.add_argument('--workers', type=int,
                        dest='workers', help='number of horizontal bands rendered in parallel',
                        metavar='WORKERS', default=DEFAULT_WORKERS)

    parser.add_argument('--backend', choices=sorted(BACKENDS), default='python',
                        help='band renderer: "python" iterates pixel by pixel, "tensorflow" iterates whole bands at once.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format of the output. Can be any extension supported by Pillow. Default: the FILE extension, else "png".',
                        metavar='FORMAT', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def main(argv=None):
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    opt = parser.parse_args(_protect_negative_numbers(argv))

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    if opt.max_iterations <= 0:
        parser.error("--max-iterations must be positive.")
    if opt.workers <= 0:
        parser.error("--workers must be positive.")

    width, height = opt.bounds
    params = RenderParameters(
        width=width,
        height=height,
        upper_left=opt.upper_left,
        lower_right=opt.lower_right,
        max_iterations=opt.max_iterations,
        workers=opt.workers,
        backend=opt.backend,
    )

    log("TensorFlow version: %s" % tf.__version__)
    log("Rendering {0}x{1} from {2} to {3} with the {4} backend".format(
        width, height, params.upper_left, params.lower_right, params.backend))

    start = time.perf_counter()
    result = render_image(params)
    elapsed = time.perf_counter() - start
    busy = sum(1 for band in result.bands if band.height)
    log("Rendered {0} bands in {1:.2f}s".format(busy, elapsed))

    try:
        output_path = write_image(opt.file, result.pixels, opt.format)
    except (OSError, ValueError, KeyError) as exc:
        print(f"error writing image file: {exc}", file=sys.stderr)
        return 1

    log("Wrote %s" % output_path)
    return 0


def _protect_negative_numbers(argv):
    """Keep values such as ``-1.20,0.35`` from being read as options.

    argparse treats any argument containing a space as a positional value, and
    both ``int`` and ``float`` ignore surrounding whitespace.
    """

    protected = []
    for arg in argv:
        if len(arg) > 1 and arg[0] == "-" and (arg[1].isdigit() or arg[1] == "."):
            arg = " " + arg
        protected.append(arg)
    return protected


if __name__ == '__main__':
    sys.exit(main())
