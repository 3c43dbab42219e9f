"""
Hittable geometry: primitives (spheres, rectangles, triangles), the
list and box composites, transform decorators, participating media and
the bounding-volume hierarchy.
"""
