import sys

from shotframe.app.main import main

sys.exit(main())
