import argparse
import logging
import sys

from errors import EmptyGraphError, TourError, UsageError
from tour_search import find_min_tour
from tour_utils import format_tour, input_file_to_graph, is_connected, list_edges
from utils import DEBUG, EXIT_OK, NORMAL, SILENT, VERBOSE

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    SILENT: logging.CRITICAL,
    NORMAL: logging.WARNING,
    VERBOSE: logging.INFO,
    DEBUG: logging.DEBUG,
}


class _UsageParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


class _VerbosityAction(argparse.Action):
    """First verbosity flag wins, later ones are remembered and reported."""

    def __init__(self, option_strings, dest, const, **kwargs):
        super().__init__(option_strings, dest, nargs=0, const=const, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest) is None:
            setattr(namespace, self.dest, self.const)
        else:
            namespace.ignored_flags = getattr(namespace, 'ignored_flags', []) + [option_string]


def build_parser():
    parser = _UsageParser(
        prog='tour-search',
        description="Minimum-cost tour through every node of an edge-list graph.",
        add_help=False,
    )
    parser.add_argument('-h', dest='help', action='store_true', help="print this help and exit")
    parser.add_argument('-v', dest='verbosity', action=_VerbosityAction, const=VERBOSE,
                        help="verbose output")
    parser.add_argument('-d', dest='verbosity', action=_VerbosityAction, const=DEBUG,
                        help="debug output, implies verbose")
    parser.add_argument('-s', dest='verbosity', action=_VerbosityAction, const=SILENT,
                        help="print nothing but critical errors")
    parser.add_argument('files', nargs='*', metavar='FILE',
                        help="graph file, one '<id>;<weight>;<id>' edge per line")
    return parser


def configure_logging(verbosity):
    logging.basicConfig(
        level=LOG_LEVELS[verbosity],
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
        force=True,
    )


def run(files):
    if len(files) > 1:
        for extra in files[1:]:
            logger.warning("Only one graph file is accepted. Ignoring %s", extra)
    if not files:
        raise EmptyGraphError("No graph file given")

    graph = input_file_to_graph(files[0])
    if len(graph) == 0:
        raise EmptyGraphError(f"No nodes in graph {files[0]}")

    for node in graph.nodes():
        logger.debug(list_edges(graph, node.id))
    if not is_connected(graph):
        logger.warning("Graph is not connected, no tour can exist")

    result = find_min_tour(graph)
    print(format_tour(result, graph.entry.id))
    return EXIT_OK


def main(argv=None):
    parser = build_parser()
    try:
        args = parser.parse_intermixed_args(argv)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: {e}", file=sys.stderr)
        return e.exit_code

    if args.help:
        parser.print_help()
        return EXIT_OK

    verbosity = NORMAL if args.verbosity is None else args.verbosity
    configure_logging(verbosity)
    for flag in getattr(args, 'ignored_flags', []):
        logger.warning("Verbosity already set. Ignoring %s", flag)
    logger.debug("Verbosity set to %d", verbosity)

    try:
        return run(args.files)
    except TourError as e:
        logger.critical("%s", e)
        return e.exit_code


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
