import logging

LOGGER = logging.getLogger("f1_ext_install")

_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter(fmt="%(levelname)s: %(message)s"))

LOGGER.addHandler(_handler)


def set_verbosity(verbose: int) -> None:
    """Map the number of ``-v`` flags to the level of :py:data:`LOGGER`:
    none logs only errors, one adds the executed commands and two or more
    enable debug output.

    """
    if verbose > 0:
        LOGGER.setLevel((3 - min(verbose, 2)) * 10)
    else:
        LOGGER.setLevel(logging.ERROR)
