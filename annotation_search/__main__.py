"""Run annotation-search as Python module."""
import sys

import annotation_search.main

if __name__ == "__main__":
    # The ``prog`` needs to be set in the argparse.
    # Otherwise the program name in the help shown to the user will be ``__main__``.
    sys.exit(annotation_search.main.main(prog="annotation_search"))
