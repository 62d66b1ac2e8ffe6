import sys

from rdf_geoindex.cli import main

sys.exit(main())
