"""Verbose-only console logging shared by the command line scripts."""

import os
import sys
import warnings

VERBOSE_FLAGS = {"--verbose", "-v"}

VERBOSE = False


def verbose_requested(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    return any(arg in VERBOSE_FLAGS for arg in argv)


def set_verbose(flag):
    global VERBOSE
    VERBOSE = bool(flag)


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


def quiet_tensorflow(verbose):
    """Silence TensorFlow's C++ and protobuf chatter unless running verbose.

    Must run before TensorFlow is imported to affect the C++ logger.
    """

    env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
    suppress = (not verbose) and env_log_level != "0"
    if suppress and env_log_level is None:
        os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"
    if suppress:
        warnings.filterwarnings(
            "ignore",
            message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
            category=UserWarning,
            module="google.protobuf",
        )
    return suppress
