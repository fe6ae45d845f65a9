import sys
from argparse import ArgumentParser

from mandelwarp.logs import log, quiet_tensorflow, set_verbose, verbose_requested

quiet_tensorflow(verbose_requested())
set_verbose(verbose_requested())

from mandelwarp import (
    ImageDecodeError,
    ImageIOError,
    ImageReadError,
    read_image,
    transform_image,
    write_image,
)

EXIT_OK = 0
EXIT_READ_ERROR = 3
EXIT_DECODE_ERROR = 4
EXIT_WRITE_ERROR = 5


def exit_code_for(err):
    if isinstance(err, ImageReadError):
        return EXIT_READ_ERROR
    if isinstance(err, ImageDecodeError):
        return EXIT_DECODE_ERROR
    return EXIT_WRITE_ERROR


def build_parser():
    parser = ArgumentParser(
        description='Multiply every pixel of an image, read as a complex number, by 1+0.1i.'
    )
    parser.add_argument('input', help='image to transform')
    parser.add_argument('output', help='where to write the transformed image (.png, .bmp, .tif or .ppm)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging.')
    return parser


def run(input_path, output_path):
    image = read_image(input_path)
    transformed = transform_image(image)
    log("Kept %d pixels in a %dx%d frame" % (len(transformed), transformed.bounds.width, transformed.bounds.height))
    write_image(output_path, transformed)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)
    set_verbose(opt.verbose)

    try:
        run(opt.input, opt.output)
    except ImageIOError as err:
        print("err {}".format(err))
        return exit_code_for(err)
    print("done")
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
