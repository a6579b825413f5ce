"""python -m gemfilelint で CLI を実行"""

import sys

from .cli import main


sys.exit(main())
