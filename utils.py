SILENT = 0
NORMAL = 1
VERBOSE = 2
DEBUG = 3

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_EMPTY_GRAPH = 2
EXIT_FILE_ERROR = 3


def read_file(file):
    """
    Read the whole file as text, one character per byte.
    Lines keep their newline so a parser can tell where each one ends.
    """
    with open(file, 'r', encoding='latin-1') as f:
        return f.read()
