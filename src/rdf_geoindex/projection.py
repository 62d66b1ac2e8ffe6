"""
Coordinate transformation between spatial reference systems.

Wraps pyproj Transformers. Projection never mutates its input: every
coordinate sequence is transformed into a new geometry value with the
same structure (ring counts, sequence counts and ordering).
"""

import math
from functools import lru_cache
from typing import Optional

from pyproj import Transformer
from pyproj.exceptions import CRSError, ProjError

from rdf_geoindex.errors import UnsupportedProjection
from rdf_geoindex.wkt.ast import CoordinateSequence, Geometry


@lru_cache(maxsize=64)
def _get_transformer(source_crs: str, target_crs: str) -> Transformer:
    # always_xy keeps WKT (x=lon, y=lat) axis order for geographic CRSs
    try:
        return Transformer.from_crs(source_crs, target_crs, always_xy=True)
    except (CRSError, ProjError) as e:
        raise UnsupportedProjection(source_crs, target_crs, str(e)) from e


def _same_crs(a: str, b: str) -> bool:
    return a.strip().upper() == b.strip().upper()


class GeometryProjector:
    """
    Reprojects geometry values into a target CRS.

    Example:
        projector = GeometryProjector(target_crs="EPSG:3857")
        mercator = projector.project(parse_wkt("POINT (30 10)"))

    Args:
        target_crs: CRS results are expressed in
        source_crs: CRS assumed for geometries that do not name one
        honor_geometry_crs: Use a geometry's own ``crs`` as the source
            when it has one
    """

    def __init__(
        self,
        target_crs: str = "EPSG:3857",
        source_crs: str = "EPSG:4326",
        honor_geometry_crs: bool = True,
    ):
        self.target_crs = target_crs
        self.source_crs = source_crs
        self.honor_geometry_crs = honor_geometry_crs

    def source_for(self, geometry: Geometry) -> str:
        if self.honor_geometry_crs and geometry.crs:
            return geometry.crs
        return self.source_crs

    def project(
        self,
        geometry: Geometry,
        from_crs: Optional[str] = None,
        to_crs: Optional[str] = None,
    ) -> Geometry:
        """
        Transform every coordinate of a geometry.

        Args:
            geometry: Geometry to transform
            from_crs: Source CRS; defaults to the geometry's CRS or the
                projector's source CRS
            to_crs: Target CRS; defaults to the projector's target CRS

        Returns:
            New geometry tagged with the target CRS

        Raises:
            UnsupportedProjection: If the CRS pair cannot be transformed or a
                coordinate falls outside the target projection's domain
        """
        source = from_crs or self.source_for(geometry)
        target = to_crs or self.target_crs
        return project(geometry, source, target)


def project(geometry: Geometry, from_crs: str, to_crs: str) -> Geometry:
    """Transform ``geometry`` from ``from_crs`` to ``to_crs``."""
    if _same_crs(from_crs, to_crs):
        return geometry.with_crs(to_crs)

    transformer = _get_transformer(from_crs, to_crs)

    def transform(seq: CoordinateSequence) -> CoordinateSequence:
        xs = [c[0] for c in seq]
        ys = [c[1] for c in seq]
        try:
            tx, ty = transformer.transform(xs, ys, errcheck=True)
        except ProjError as e:
            raise UnsupportedProjection(from_crs, to_crs, str(e)) from e
        out = tuple(zip(tx, ty))
        for x, y in out:
            if not (math.isfinite(x) and math.isfinite(y)):
                raise UnsupportedProjection(
                    from_crs, to_crs, "coordinate outside the projection domain"
                )
        return out

    return geometry.map_sequences(transform).with_crs(to_crs)
