import sys

from awsprovider.cli.main import main

sys.exit(main())
