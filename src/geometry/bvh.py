# src/geometry/bvh.py
import logging
import math
from typing import List, Optional, Sequence
from core.aabb import AABB
from core.ray import Ray
from core.utils import thread_rng
from geometry.hittable import Hittable, HitRecord

logger = logging.getLogger(__name__)

def _box_key(obj: Hittable, axis: int, time0: float, time1: float) -> float:
    box = obj.bounding_box(time0, time1)
    # Unboxed objects sort first; they never take part in pruning.
    return box.minimum[axis] if box is not None else -math.inf

class BVHNode(Hittable):
    """
    Binary bounding-volume hierarchy over a fixed set of objects.

    Each split sorts its span by bounding-box minimum along an axis drawn
    uniformly at random and halves it at the median index. A span of one
    object becomes a leaf whose left and right children are that object.
    """
    def __init__(self, objects: Sequence[Hittable], start: int, end: int,
                 time0: float = 0.0, time1: float = 0.0):
        object_span = end - start
        if object_span <= 0:
            raise ValueError("Cannot build a BVH node over an empty object span")

        axis = thread_rng().randrange(3)

        if object_span == 1:
            self.left = self.right = objects[start]
        elif object_span == 2:
            a, b = objects[start], objects[start + 1]
            if _box_key(a, axis, time0, time1) < _box_key(b, axis, time0, time1):
                self.left, self.right = a, b
            else:
                self.left, self.right = b, a
        else:
            span = sorted(objects[start:end],
                          key=lambda obj: _box_key(obj, axis, time0, time1))
            mid = object_span // 2
            self.left = BVHNode(span, 0, mid, time0, time1)
            self.right = BVHNode(span, mid, object_span, time0, time1)

        left_box = self.left.bounding_box(time0, time1)
        right_box = self.right.bounding_box(time0, time1)
        if left_box is None or right_box is None:
            logger.warning("BVH child without a bounding box; node will not be pruned")
            self.box = None
        else:
            self.box = AABB.surrounding_box(left_box, right_box)

    @classmethod
    def from_list(cls, objects: Sequence[Hittable], time0: float = 0.0,
                  time1: float = 0.0) -> "BVHNode":
        """
        Builds a hierarchy over every object of `objects` (a HittableList or
        any sequence). The caller's container is left untouched.
        """
        items: List[Hittable] = list(objects)
        if not items:
            raise ValueError("Cannot build a BVH over an empty object list")
        logger.debug("Building BVH over %d objects for t in [%s, %s]",
                     len(items), time0, time1)
        return cls(items, 0, len(items), time0, time1)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        if self.box is not None and not self.box.hit(ray, t_min, t_max):
            return None

        hit_left = self.left.hit(ray, t_min, t_max)
        if self.right is self.left:
            return hit_left
        if hit_left is not None:
            # A closer hit on the right still overrides the left one.
            hit_right = self.right.hit(ray, t_min, hit_left.t)
            return hit_right if hit_right is not None else hit_left
        return self.right.hit(ray, t_min, t_max)

    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        return self.box
