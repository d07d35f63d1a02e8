"""Allow running as: python -m aml_coverage"""

import sys

from aml_coverage.main import cli

if __name__ == "__main__":
    sys.exit(cli())
