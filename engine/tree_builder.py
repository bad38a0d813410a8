from engine.entity import fully_derive
from engine.tree_node import TreeNode
from utils.error import ContractViolationError
from utils.logger import logger as LOG


def cuboid_sort_key(index_entity):
    # fewer dimensions first, so a more direct parent is always met before its own parents
    return len(index_entity.dimensions), index_entity.id


class TreeBuilder:
    def __init__(self, cuboids, derive=fully_derive):
        """
        Build the static spanning forest of a cube
        :param cuboids: index entity -> its layouts
        :param derive: derive(candidate, target), whether target can be rolled up from candidate
        """
        self._cuboids = cuboids
        self._derive = derive
        seen = set()
        for entity in cuboids:
            if entity.id in seen:
                raise ContractViolationError("Duplicate cuboid id {}".format(entity.id))
            seen.add(entity.id)
        self._sorted_cuboids = sorted(cuboids, key=cuboid_sort_key)

        self.nodes = {}
        self.roots = []
        self.layouts = {}

    def build(self):
        """
        Create one node per cuboid, a cuboid without any candidate is a root
        :return: self
        """
        for cuboid in self._sorted_cuboids:
            self._add_cuboid(cuboid)
        # the tree scans nodes by cuboid id
        self.nodes = dict(sorted(self.nodes.items()))
        LOG.info("CubeId: %s, Spanning forest built, cuboids: %s, roots: %s", self._cube_id(), len(self.nodes),
                 [root.id for root in self.roots])
        return self

    def _add_cuboid(self, cuboid):
        candidates = self.find_direct_parent_candidates(cuboid)
        node = TreeNode(cuboid, parent_candidates=[candidate.id for candidate in candidates])
        if node.is_root():
            self.roots.append(node)
        self.nodes[cuboid.id] = node

        for layout in self._cuboids[cuboid]:
            if layout.id in self.layouts:
                raise ContractViolationError(
                    "Layout {} is owned by both cuboid {} and {}".format(layout.id, self.layouts[layout.id].index_id,
                                                                         cuboid.id))
            self.layouts[layout.id] = layout
        LOG.debug("CubeId: %s, Cuboid: %s, Parent candidates: %s", self._cube_id(), cuboid.id,
                  list(node.parent_candidates))

    def find_direct_parent_candidates(self, entity):
        """
        Only keep the direct parents, eg ABCD -> ABC -> AB, ABCD is ABC's direct parent, but not AB's.
        ABC and ABD are both candidates of AB, the best one is chosen while building.
        :param entity: IndexEntity
        :return: candidate list in scan order
        """
        candidates = []
        for cuboid in self._sorted_cuboids:
            if cuboid.id == entity.id or not self._derive(cuboid, entity):
                continue

            # a candidate that derives an accepted one is not direct
            if not any(self._derive(cuboid, candidate) for candidate in candidates):
                candidates.append(cuboid)
        return candidates

    def _cube_id(self):
        for cuboid in self._sorted_cuboids:
            return cuboid.cube_id
        return None
