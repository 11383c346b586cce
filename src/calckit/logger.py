"""Contains the name for the logger of CalcKit modules.

``calckit`` uses a simple logging system based on the
`Logging <https://docs.python.org/3/library/logging.html>`__ standard library.
Logging messages are grouped in different levels:

* ``DEBUG``: Details of every derivative and integral evaluation
    (step sizes, sample counts, inferred integration variables).
* ``WARNING``: An indication that something unexpected
    happened which may require attention, e.g. a non-finite result.

By default, only messages of level ``WARNING`` are displayed.

Calling applications can configure the format and log level of the displayed messages
by `Configuring Logging <https://docs.python.org/3/howto/logging.html#configuring-logging>`__
for ``calckit.logger.calckit_logger``, e.g.::

    >>> import logging
    >>> logging.basicConfig(
    ...     level=logging.DEBUG,
    ...     format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    ... )
"""
import logging

logger_name = "calckit"
calckit_logger = logging.getLogger(logger_name)
