"""Exceptions raised inside the scanner when an input contract is violated."""


class ScannerError(Exception):
    """Base class for scanner errors."""


class InvalidPolygonError(ScannerError, ValueError):
    """A corner sequence does not describe exactly four points."""


class DegenerateQuadrilateralError(ScannerError, ValueError):
    """Corners are collinear or coincident, so no rectangle can be produced."""
