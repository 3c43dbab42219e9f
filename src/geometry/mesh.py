# geometry/mesh.py
import logging
import os
from typing import List, Optional
from core.vector import Vector3
from core.ray import Ray
from core.aabb import AABB
from geometry.hittable import Hittable, HitRecord
from geometry.rect import RECT_PADDING
from geometry.world import HittableList

logger = logging.getLogger(__name__)

# Rays this close to parallel with the plane are treated as misses.
PARALLEL_EPSILON = 1e-4

class Triangle(Hittable):
    """A single flat triangle; (u, v) are the barycentric weights of v1 and v2."""
    def __init__(self, v0: Vector3, v1: Vector3, v2: Vector3, material):
        self.v0 = v0
        self.v1 = v1
        self.v2 = v2
        self.material = material
        n = (v1 - v0).cross(v2 - v0)
        self.double_area = n.length()
        self.normal = n.normalize()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        n = self.normal
        nd = n.dot(ray.direction)
        if abs(nd) < PARALLEL_EPSILON:
            return None
        t = n.dot(self.v0 - ray.origin) / nd
        if t < t_min or t > t_max:
            return None
        p = ray.at(t)

        # Inside-outside test: p must lie left of every edge.
        w0 = n.dot((self.v2 - self.v1).cross(p - self.v1))
        if w0 < 0:
            return None
        w1 = n.dot((self.v0 - self.v2).cross(p - self.v2))
        if w1 < 0:
            return None
        w2 = n.dot((self.v1 - self.v0).cross(p - self.v0))
        if w2 < 0:
            return None

        u = w1 / self.double_area
        v = w2 / self.double_area
        return HitRecord.facing(ray, t, p, n, u, v, self.material)

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> AABB:
        """Compute the bounding box for the triangle, padded so flat triangles
        still have volume."""
        vs = (self.v0, self.v1, self.v2)
        pad = Vector3(RECT_PADDING, RECT_PADDING, RECT_PADDING)
        return AABB(Vector3(*(min(v[a] for v in vs) for a in range(3))) - pad,
                    Vector3(*(max(v[a] for v in vs) for a in range(3))) + pad)

def _require_file(filename: str) -> None:
    if not os.path.exists(filename):
        raise FileNotFoundError(f"Model file not found: {filename}")

def load_ply(filename: str, material, scale: float = 1.0) -> HittableList:
    """
    Load an ASCII PLY model ("element vertex N", "element face M", then
    "end_header") as a list of triangles scaled uniformly by `scale`.
    """
    _require_file(filename)
    with open(filename, "r") as f:
        lines = [line.strip() for line in f]

    vertex_count = face_count = 0
    body = None
    for i, line in enumerate(lines):
        parts = line.split()
        if line == "end_header":
            body = i + 1
            break
        if len(parts) == 3 and parts[0] == "element":
            if parts[1] == "vertex":
                vertex_count = int(parts[2])
            elif parts[1] == "face":
                face_count = int(parts[2])
    if body is None:
        raise ValueError(f"{filename}: missing end_header")

    data = [(num, line) for num, line in enumerate(lines[body:], body + 1) if line]
    if len(data) < vertex_count + face_count:
        raise ValueError(f"{filename}: expected {vertex_count} vertices and "
                         f"{face_count} faces, found {len(data)} data lines")

    vertices: List[Vector3] = []
    triangles = HittableList()
    for k, (line_num, line) in enumerate(data[:vertex_count + face_count]):
        parts = line.split()
        try:
            if k < vertex_count:
                x, y, z = (float(c) * scale for c in parts[:3])
                vertices.append(Vector3(x, y, z))
                continue
            if parts[0] != "3":
                raise ValueError("only triangular faces are supported")
            idx = [int(i) for i in parts[1:4]]
            if len(idx) != 3:
                raise ValueError("a face needs three vertex indices")
            if any(i < 0 or i >= len(vertices) for i in idx):
                raise IndexError(f"vertex index out of range 0..{len(vertices) - 1}")
            triangles.add(Triangle(vertices[idx[0]], vertices[idx[1]], vertices[idx[2]], material))
        except (ValueError, IndexError) as e:
            raise ValueError(f"{filename}:{line_num}: cannot parse {line!r}: {e}") from e

    logger.info("Loaded %s: %d vertices, %d triangles", filename, len(vertices), len(triangles))
    return triangles

def load_obj(filename: str, material, scale: float = 1.0) -> HittableList:
    """Load a Wavefront OBJ model, fan-triangulating polygonal faces."""
    _require_file(filename)
    vertices: List[Vector3] = []
    triangles = HittableList()

    def vertex_index(vertex_str: str) -> int:
        idx = int(vertex_str.split('/')[0])
        # OBJ indices are 1-based; negative ones count from the end.
        return idx - 1 if idx > 0 else len(vertices) + idx

    with open(filename, 'r') as f:
        for line_num, line in enumerate(f, 1):
            values = line.split()
            if not values or values[0].startswith('#'):
                continue
            try:
                if values[0] == 'v':
                    vertices.append(Vector3(float(values[1]) * scale,
                                            float(values[2]) * scale,
                                            float(values[3]) * scale))
                elif values[0] == 'f':
                    idx = [vertex_index(v) for v in values[1:]]
                    for i in range(1, len(idx) - 1):
                        triangles.add(Triangle(vertices[idx[0]], vertices[idx[i]],
                                               vertices[idx[i + 1]], material))
            except (ValueError, IndexError) as e:
                raise ValueError(f"{filename}:{line_num}: cannot parse {line.strip()!r}") from e

    logger.info("Loaded %s: %d vertices, %d triangles", filename, len(vertices), len(triangles))
    return triangles
