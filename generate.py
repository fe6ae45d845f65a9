import sys
from argparse import ArgumentParser
from functools import partial

from mandelwarp.logs import log, quiet_tensorflow, set_verbose, verbose_requested

_suppress_messages = quiet_tensorflow(verbose_requested())
set_verbose(verbose_requested())

import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from mandelwarp import (
    GeneratorParameters,
    ImageIOError,
    assemble_image,
    escape_times,
    viewport_around,
    write_image,
)
from mandelwarp.escape import BUILTIN_PALETTES, ESCAPE_PALETTE
from mandelwarp.generator import DEFAULT_HEIGHT, DEFAULT_WIDTH
from matplotlib import colormaps


def select_device():
    """Use the first visible GPU when there is one, otherwise the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def build_parser():
    parser = ArgumentParser(description='Render the escape times of the Mandelbrot iteration to an image.')

    parser.add_argument('output', help='path of the image to write (.png, .bmp, .tif or .ppm)')

    parser.add_argument('--width', type=int,
                        dest='width', help='width of the image in pixels',
                        metavar='WIDTH', default=DEFAULT_WIDTH)

    parser.add_argument('--height', type=int,
                        dest='height', help='height of the image in pixels',
                        metavar='HEIGHT', default=DEFAULT_HEIGHT)

    parser.add_argument('--x-center', type=float,
                        dest='x_center', help='real part of the viewport center',
                        metavar='X_CENTER', default=0.0)

    parser.add_argument('--y-center', type=float,
                        dest='y_center', help='imaginary part of the viewport center',
                        metavar='Y_CENTER', default=0.0)

    parser.add_argument('--x-width', type=float,
                        dest='x_width', help='width of the viewport in the complex plane',
                        metavar='X_WIDTH', default=2.2)

    parser.add_argument('--y-width', type=float,
                        dest='y_width', help='height of the viewport in the complex plane',
                        metavar='Y_WIDTH', default=2.2)

    parser.add_argument('--palette', type=str,
                        dest='palette',
                        help='"escape" (affine RGB), "gray", or any matplotlib colormap name',
                        metavar='PALETTE', default=ESCAPE_PALETTE)

    parser.add_argument('--workers', type=int,
                        dest='workers', help='number of worker threads (default: one per CPU)',
                        metavar='WORKERS', default=None)

    parser.add_argument('--device', type=str,
                        dest='device', help='TensorFlow device to evaluate on, e.g. "/CPU:0" (default: auto)',
                        metavar='DEVICE', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_parameters(opt, parser):
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.x_width <= 0 or opt.y_width <= 0:
        parser.error("--x-width and --y-width must be positive.")
    if opt.workers is not None and opt.workers <= 0:
        parser.error("--workers must be positive.")
    if opt.palette not in BUILTIN_PALETTES and opt.palette not in colormaps:
        parser.error(f"Unknown palette '{opt.palette}'.")

    return GeneratorParameters(
        width=opt.width,
        height=opt.height,
        viewport=viewport_around(opt.x_center, opt.y_center, opt.x_width, opt.y_width),
        palette=opt.palette,
        workers=opt.workers,
    )


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)
    set_verbose(opt.verbose)

    params = resolve_parameters(opt, parser)
    log("TensorFlow version: %s" % tf.__version__)
    device = opt.device if opt.device is not None else select_device()

    image = assemble_image(params, partial(escape_times, device=device))
    try:
        write_image(opt.output, image)
    except ImageIOError as err:
        print("err {}".format(err))
        return 1
    print("done")
    return 0


if __name__ == '__main__':
    sys.exit(main())
