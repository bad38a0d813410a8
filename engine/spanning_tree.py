import threading

from engine.entity import fully_derive
from engine.tree_builder import TreeBuilder
from utils.error import ContractViolationError, NotFoundError
from utils.logger import logger as LOG


class SpanningTree:
    def __init__(self, cuboids):
        """
        Build relation between the cuboids of a cube
        :param cuboids: index entity -> its layouts
        """
        self.cuboids = dict(cuboids)

    def is_valid(self, cuboid_id):
        raise NotImplementedError

    def get_cuboid_count(self):
        raise NotImplementedError

    def get_root_index_entities(self):
        raise NotImplementedError

    def get_layouts(self, index_entity):
        raise NotImplementedError

    def get_index_entity(self, cuboid_id):
        raise NotImplementedError

    def get_cuboid_layout(self, layout_id):
        raise NotImplementedError

    def get_children(self, parent):
        raise NotImplementedError

    def get_all_index_entities(self):
        raise NotImplementedError

    def decide_next_layer(self, current_layer, segment):
        raise NotImplementedError


class ForestSpanningTree(SpanningTree):
    """
    Forest of cuboids, one tree per root. If the base cuboid exists the forest is a single tree.

    Topology (parent candidates, roots) is fixed at construction. The parent of every other cuboid
    is chosen while building, by decide_next_layer, from the cheapest built candidate.

    One forest is owned by one build session: decide_next_layer is the only writer and refuses
    to run concurrently with itself, readers must not run while a decision is in flight.
    """

    def __init__(self, cuboids, derive=fully_derive):
        super().__init__(cuboids)
        builder = TreeBuilder(self.cuboids, derive=derive).build()
        self._nodes = builder.nodes
        self._roots = builder.roots
        self._layouts = builder.layouts
        self._write_lock = threading.Lock()

    def is_valid(self, cuboid_id):
        return cuboid_id in self._nodes

    def get_cuboid_count(self):
        return len(self._nodes)

    def get_root_index_entities(self):
        return [node.index_entity for node in self._roots]

    def get_layouts(self, index_entity):
        if index_entity not in self.cuboids:
            raise NotFoundError("Cuboid (ID:{}) does not exist!".format(index_entity.id))
        return list(self.cuboids[index_entity])

    def get_index_entity(self, cuboid_id):
        return self.get_node(cuboid_id).index_entity

    def get_cuboid_layout(self, layout_id):
        return self._layouts.get(layout_id)

    def get_node(self, cuboid_id):
        node = self._nodes.get(cuboid_id)
        if node is None:
            raise NotFoundError("Cuboid (ID:{}) does not exist!".format(cuboid_id))
        return node

    def get_children(self, parent):
        """
        Only meaningful once the parent has been passed to decide_next_layer
        :param parent: IndexEntity
        :return: child index entities
        """
        parent_node = self.get_node(parent.id)
        if not parent_node.has_been_decided:
            raise ContractViolationError("Node must have been decided before get its children.",
                                         payload=dict(cuboidId=parent.id))
        return [self._nodes[child_id].index_entity for child_id in parent_node.children]

    def get_parent_index_entity(self, index_entity):
        node = self.get_node(index_entity.id)
        if node.parent is None:
            return None
        return self._nodes[node.parent].index_entity

    def get_all_index_entities(self):
        return [node.index_entity for node in self._nodes.values()]

    def is_built(self, index_entity, segment):
        return segment.is_built(self._first_layout(index_entity).id)

    def get_rows(self, index_entity, segment):
        rows = segment.get_rows(self._first_layout(index_entity).id)
        if rows is None:
            raise ContractViolationError("Cuboid {} has not been built".format(index_entity.id),
                                         payload=dict(cuboidId=index_entity.id))
        return rows

    def _first_layout(self, index_entity):
        layouts = self.get_layouts(index_entity)
        if not layouts:
            raise ContractViolationError("Cuboid {} owns no layout".format(index_entity.id))
        return layouts[0]

    def decide_next_layer(self, current_layer, segment):
        """
        After built, we know each cuboid's size, then find each cuboid's children.
        Smaller cuboid has smaller cost, and has higher priority when finding children.
        :param current_layer: index entities just built in the segment
        :param segment: BuildContext of the segment
        :return:
        """
        if not self._write_lock.acquire(blocking=False):
            raise ContractViolationError("Spanning tree is being decided by another caller")
        try:
            # resolve every cost before touching any node
            costs = {}
            for index_entity in current_layer:
                node = self.get_node(index_entity.id)
                costs[node.id] = self.get_rows(node.index_entity, segment)

            # ties are broken by cuboid id for deterministic
            ordered_ids = sorted(costs, key=lambda cuboid_id: (costs[cuboid_id], cuboid_id))
            for cuboid_id in ordered_ids:
                parent_node = self._nodes[cuboid_id]
                if parent_node.has_been_decided:
                    LOG.warning("CubeId: %s, Cuboid %s has been decided, skip it",
                                parent_node.index_entity.cube_id, cuboid_id)
                    continue
                self._adjust_tree(parent_node, segment)
                LOG.info("Adjust spanning tree. Current cube: %s. Current index entity: %s. Rows: %s. Its children: %s",
                         parent_node.index_entity.cube_id, cuboid_id, costs[cuboid_id], parent_node.children)
        finally:
            self._write_lock.release()

    def _adjust_tree(self, parent_node, segment):
        children = [node for node in self._nodes.values() if self._should_be_added(node, parent_node, segment)]

        # update child node's parent
        for node in children:
            node.attach(parent_node)

        # update parent node's children
        parent_node.decide(children)

    def _should_be_added(self, node, parent_node, segment):
        # already has a parent, or is a root
        if node.parent is not None or not node.parent_candidates:
            return False
        # this cuboid is not one of its candidates
        if parent_node.id not in node.parent_candidates:
            return False
        # wait until every candidate is built, then the cheapest one wins
        return all(self.is_built(self._nodes[candidate_id].index_entity, segment)
                   for candidate_id in node.parent_candidates)

    def to_dict(self):
        nodes = []
        for node in self._nodes.values():
            item = node.to_dict()
            item['layouts'] = [layout.id for layout in self.cuboids[node.index_entity]]
            nodes.append(item)
        return dict(cuboidCount=self.get_cuboid_count(),
                    roots=[node.id for node in self._roots],
                    nodes=nodes)
