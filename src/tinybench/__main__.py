import sys

from tinybench.cli import main

sys.exit(main())
