from engine.entity import fully_derive
from engine.spanning_tree import ForestSpanningTree
from utils.logger import logger as LOG


class CubeBuildJob:
    def __init__(self, cube_id, cuboids, segment, derive=fully_derive):
        """
        Drive the spanning forest of one segment layer by layer
        :param cube_id:
        :param cuboids: index entity -> its layouts
        :param segment: BuildContext of the segment
        :param derive: derivation predicate between cuboids
        """
        self._cube_id = cube_id
        self._segment = segment
        self.spanning_tree = ForestSpanningTree(cuboids, derive=derive)

    def _built(self, index_entity):
        return self.spanning_tree.is_built(index_entity, self._segment)

    def _build_index(self, index_entity, parent, build_layout):
        for layout in self.spanning_tree.get_layouts(index_entity):
            rows = build_layout(layout, parent)
            self._segment.record_layout(layout.id, rows)
        LOG.info("CubeId: %s, Cuboid %s built from %s", self._cube_id, index_entity.id,
                 'flat table' if parent is None else parent.id)

    def run(self, build_layout):
        """
        Build every cuboid of the segment, roots from the flat table, the others from their decided parent
        :param build_layout: build_layout(layout, parent index entity or None) -> row count
        :return: the spanning tree
        """
        layer = []
        for root in self.spanning_tree.get_root_index_entities():
            if not self._built(root):
                self._build_index(root, None, build_layout)
            layer.append(root)

        depth = 0
        while layer:
            LOG.info("CubeId: %s, Layer %s: %s", self._cube_id, depth, [entity.id for entity in layer])
            self.spanning_tree.decide_next_layer(layer, self._segment)
            next_layer = []
            for parent in layer:
                for child in self.spanning_tree.get_children(parent):
                    if not self._built(child):
                        self._build_index(child, parent, build_layout)
                    next_layer.append(child)
            layer = next_layer
            depth += 1
        return self.spanning_tree

    def resume(self):
        """
        Re-derive the decisions from the build state persisted in the segment
        :return: the spanning tree
        """
        layer = [root for root in self.spanning_tree.get_root_index_entities() if self._built(root)]
        while layer:
            self.spanning_tree.decide_next_layer(layer, self._segment)
            layer = [child
                     for parent in layer
                     for child in self.spanning_tree.get_children(parent)
                     if self._built(child)]
        LOG.info("CubeId: %s, Resumed, next cuboids: %s", self._cube_id,
                 [entity.id for entity in self.next_index_entities()])
        return self.spanning_tree

    def next_index_entities(self):
        """
        Cuboids that can be built now, unbuilt roots and unbuilt children of decided cuboids
        :return:
        """
        next_entities = []
        for index_entity in self.spanning_tree.get_all_index_entities():
            if self._built(index_entity):
                continue
            node = self.spanning_tree.get_node(index_entity.id)
            if node.is_root() or node.parent is not None:
                next_entities.append(index_entity)
        return next_entities
