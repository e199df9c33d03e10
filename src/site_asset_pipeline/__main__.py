"""Entry point for python -m site_asset_pipeline.

等同于 asset-pipeline 命令。
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
