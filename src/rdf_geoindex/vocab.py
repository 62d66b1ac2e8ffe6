"""
Vocabulary IRIs recognised by rdf-geoindex.
"""

RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS = "http://www.w3.org/2000/01/rdf-schema#"
GEOSPARQL = "http://www.opengis.net/ont/geosparql#"
LOCN = "http://www.w3.org/ns/locn#"

RDF_TYPE = f"{RDF}type"
RDFS_LABEL = f"{RDFS}label"

# Geometry literal predicate
GEO_AS_WKT = f"{GEOSPARQL}asWKT"

# Geometry relation predicate used for reverse lookup
LOCN_GEOMETRY = f"{LOCN}geometry"

# CRS IRIs as they appear in GeoSPARQL WKT literals
OGC_CRS_PREFIX = "http://www.opengis.net/def/crs/"
CRS84_IRI = "http://www.opengis.net/def/crs/OGC/1.3/CRS84"
