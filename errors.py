from utils import EXIT_EMPTY_GRAPH, EXIT_FILE_ERROR, EXIT_USAGE


class TourError(Exception):
    """Base class for the fatal conditions reported by the command line."""

    exit_code = EXIT_USAGE


class UsageError(TourError):
    """Unknown flag or otherwise malformed command line."""

    exit_code = EXIT_USAGE


class GraphFileError(TourError):
    """
    The graph file could not be opened or read.

    The OS errno is kept for the message only; the exit code does not
    depend on it, so it never collides with the other exit codes.
    """

    exit_code = EXIT_FILE_ERROR

    def __init__(self, path, errno, strerror):
        super().__init__(f"Failed to open {path}: {strerror}")
        self.path = path
        self.errno = errno
        self.strerror = strerror


class EmptyGraphError(TourError):
    """No node was parsed, so there is nothing to search."""

    exit_code = EXIT_EMPTY_GRAPH
