import sys

from backend_bootstrap.main import main

sys.exit(main())
