import sys

from f1_ext_install.cli import main

sys.exit(main())
