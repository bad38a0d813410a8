class LayoutEntity:
    def __init__(self, layout_id, index_id, col_order=None, shard_by_columns=None):
        """
        One physical format of an index entity
        :param layout_id: unique in the whole cube
        :param index_id: owner index entity id
        :param col_order: ordered dimension and measure ids stored in the layout
        :param shard_by_columns: dimension ids used to shard the layout
        """
        self.id = layout_id
        self.index_id = index_id
        self.col_order = list(col_order or [])
        self.shard_by_columns = list(shard_by_columns or [])

    def __eq__(self, other):
        return isinstance(other, LayoutEntity) and self.id == other.id

    def __hash__(self):
        return hash(('layout', self.id))

    def __repr__(self):
        return 'LayoutEntity(id={}, index={})'.format(self.id, self.index_id)


class IndexEntity:
    def __init__(self, index_id, dimensions, measures=(), cube_id=None, layouts=None):
        """
        A cuboid, one dimension and measure combination of the cube
        :param index_id: cuboid id
        :param dimensions: dimension ids
        :param measures: measure ids
        :param cube_id: owner cube, only used in logs
        :param layouts: the layouts of this cuboid, the first one is used to read the row count
        """
        self.id = index_id
        self.dimensions = frozenset(dimensions)
        self.measures = frozenset(measures)
        self.cube_id = cube_id
        self.layouts = list(layouts or [])

    def add_layout(self, layout_id, col_order=None, shard_by_columns=None):
        # dimensions then measures by default
        if col_order is None:
            col_order = sorted(self.dimensions) + sorted(self.measures)
        layout = LayoutEntity(layout_id, self.id, col_order=col_order, shard_by_columns=shard_by_columns)
        self.layouts.append(layout)
        return layout

    def __eq__(self, other):
        return isinstance(other, IndexEntity) and self.id == other.id

    def __hash__(self):
        return hash(('index', self.id))

    def __repr__(self):
        return 'IndexEntity(id={}, dims={}, measures={})'.format(self.id, sorted(self.dimensions),
                                                                 sorted(self.measures))


def fully_derive(candidate, target):
    """
    Whether target can be computed by rolling up candidate
    - candidate owns every measure of target
    - candidate owns every dimension of target and at least one more
    Cuboids with the same dimensions never derive each other, the candidate scan relies on
    a parent always owning more dimensions than its child.
    :param candidate: IndexEntity
    :param target: IndexEntity
    :return:
    """
    if candidate.id == target.id:
        return False
    return candidate.dimensions > target.dimensions and candidate.measures >= target.measures


def group_layouts(index_entities):
    """
    Catalog mapping used by the spanning tree, cuboid -> its layouts
    :param index_entities:
    :return:
    """
    return {entity: list(entity.layouts) for entity in index_entities}
