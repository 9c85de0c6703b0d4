import sys

from workload_provisioner.cli import main

sys.exit(main())
