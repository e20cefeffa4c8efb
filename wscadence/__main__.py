import sys

from wscadence.main import main

sys.exit(main())
