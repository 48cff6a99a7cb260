#!/usr/bin/env python3
# python -m svn_connector

# Import Python standard modules
import sys

# Import svn_connector modules
from svn_connector.main import main

sys.exit(main())
