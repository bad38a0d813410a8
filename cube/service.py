from cube.model import Cube, CubeStatus, Dimension, Measure, MeasureAction, CubeIndex, CubeLayout, CubeSegment, \
    SegmentLayout
from engine.cube_build_plan import CuboidEnumerator
from engine.entity import IndexEntity, LayoutEntity
from engine.segment import SegmentBuildContext
from engine.spanning_tree import ForestSpanningTree
from utils.error import NotFoundError, ServiceError
from utils.orm import row_to_dict, db
from utils.logger import logger as LOG


def _get_cube(cube_id):
    cube = db.session.get(Cube, cube_id)
    if cube is None or cube.status == CubeStatus.DELETED:
        raise NotFoundError("Cube (ID:{}) does not exist!".format(cube_id))
    return cube


def list_cube(page_num, page_size, show_del):
    """
    Fetch cubes in the TiDB and paginator them
    :param page_num:
    :param page_size:
    :param show_del:
    :return: list of cubes
    """
    if show_del:
        rows = Cube.query.order_by(Cube.id).limit(page_size).offset(page_num * page_size)
    else:
        rows = Cube.query.filter(Cube.status != CubeStatus.DELETED).order_by(Cube.id).limit(page_size).offset(
            page_num * page_size)
    return [row_to_dict(row) for row in rows]


def del_cube(cube_id):
    """
    Delete the cube, just mark it as deleted
    :param cube_id:
    :return:
    """
    cube = _get_cube(cube_id)
    cube.update(dict(status=CubeStatus.DELETED))
    db.session.commit()
    return True


def save_cube(name, table, desc):
    """
    Init a new cube, set the status to empty
    :param name:
    :param table:
    :return:
    """
    cube = Cube(name=name, table=table, desc=desc, status=CubeStatus.EMPTY)
    cube = cube.save()
    return cube.id


def save_measure(cube_id, measure_list):
    """
    save user define measures, every measure gets a new id
    :param cube_id: cube id
    :param measure_list:
    :return: measure ids in the same order
    """
    _get_cube(cube_id)
    measures = [Measure(action=MeasureAction[item['action']], cubeId=cube_id, col=item['col'],
                        colType=item.get('colType'), desc=item.get('desc'))
                for item in measure_list]
    db.session.add_all(measures)
    db.session.commit()
    return [measure.id for measure in measures]


def save_dimension(cube_id, dimension_list):
    """
    save user define dimensions, every dimension gets a new id
    :param cube_id: cube id
    :param dimension_list:
    :return: dimension ids in the same order
    """
    _get_cube(cube_id)
    dimensions = [Dimension(cubeId=cube_id, table=item['table'], col=item['col'], colType=item.get('colType'),
                            func=item.get('func'), desc=item.get('desc'))
                  for item in dimension_list]
    db.session.add_all(dimensions)
    db.session.commit()
    return [dimension.id for dimension in dimensions]


def _check_columns(cube_id, dimension_ids, measure_ids):
    own_dims = {row.id for row in Dimension.query.filter_by(cubeId=cube_id).all()}
    own_measures = {row.id for row in Measure.query.filter_by(cubeId=cube_id).all()}
    unknown_dims = sorted(set(dimension_ids) - own_dims)
    unknown_measures = sorted(set(measure_ids) - own_measures)
    if unknown_dims or unknown_measures:
        raise ServiceError("Cuboid refers to columns outside cube {}".format(cube_id),
                           payload=dict(dimensions=unknown_dims, measures=unknown_measures))


def _check_layouts(layout_list):
    missing = [position for position, item in enumerate(layout_list or []) if not item.get('colOrder')]
    if missing:
        raise ServiceError("Layout must declare its colOrder", payload=dict(layouts=missing))


def _add_index(cube_id, dimension_ids, measure_ids, layout_list=None):
    index = CubeIndex(cubeId=cube_id, dimensions=sorted(set(dimension_ids)), measures=sorted(set(measure_ids)))
    db.session.add(index)
    db.session.flush()

    # one default layout, dimensions then measures
    for item in layout_list or [dict(colOrder=index.dimensions + index.measures)]:
        db.session.add(CubeLayout(indexId=index.id, colOrder=item['colOrder'], shardBy=item.get('shardBy')))
    return index


def save_index(cube_id, index_list):
    """
    save user define cuboids and their layouts
    :param cube_id:
    :param index_list: [{dimensions: [...], measures: [...], layouts: [{colOrder: [...], shardBy: [...]}]}]
    :return: index ids in the same order
    """
    _get_cube(cube_id)
    # check every cuboid before adding any
    for item in index_list:
        _check_columns(cube_id, item['dimensions'], item.get('measures', []))
        _check_layouts(item.get('layouts'))
    index_ids = []
    for item in index_list:
        index_ids.append(_add_index(cube_id, item['dimensions'], item.get('measures', []), item.get('layouts')).id)
    db.session.commit()
    return index_ids


def init_index_plan(cube_id, min_dimensions=1):
    """
    Replace the cuboids of the cube with the full dimension lattice, every cuboid owns all the measures
    :param cube_id:
    :param min_dimensions:
    :return: index ids
    """
    cube = _get_cube(cube_id)
    dimension_ids = [row.id for row in Dimension.query.filter_by(cubeId=cube_id).order_by(Dimension.id).all()]
    measure_ids = [row.id for row in Measure.query.filter_by(cubeId=cube_id).order_by(Measure.id).all()]
    if not dimension_ids:
        raise ServiceError("Cube {} owns no dimension".format(cube_id))

    # the old cuboids and their build state are dropped together
    old_index_ids = [row.id for row in CubeIndex.query.filter_by(cubeId=cube_id).all()]
    if old_index_ids:
        old_layout_ids = [row.id for row in CubeLayout.query.filter(CubeLayout.indexId.in_(old_index_ids)).all()]
        if old_layout_ids:
            SegmentLayout.query.filter(SegmentLayout.layoutId.in_(old_layout_ids)).delete(synchronize_session=False)
            CubeLayout.query.filter(CubeLayout.id.in_(old_layout_ids)).delete(synchronize_session=False)
        CubeIndex.query.filter(CubeIndex.id.in_(old_index_ids)).delete(synchronize_session=False)
        db.session.expire_all()

    combinations = CuboidEnumerator(cube_id, dimension_ids, min_dimensions=min_dimensions).enumerate()
    index_ids = [_add_index(cube_id, dim_list, measure_ids).id for dim_list in combinations]
    cube.update(dict(status=CubeStatus.READY))
    db.session.commit()
    return index_ids


def load_cuboids(cube_id):
    """
    Read the cuboids of the cube for the spanning tree
    :param cube_id:
    :return: IndexEntity -> LayoutEntity list
    """
    _get_cube(cube_id)
    cuboids = {}
    for index in CubeIndex.query.filter_by(cubeId=cube_id).order_by(CubeIndex.id).all():
        entity = IndexEntity(index.id, index.dimensions, index.measures, cube_id=cube_id)
        for layout in index.layout:
            entity.layouts.append(LayoutEntity(layout.id, index.id, col_order=layout.colOrder,
                                               shard_by_columns=layout.shardBy))
        cuboids[entity] = list(entity.layouts)
    LOG.info("CubeId: %s, Cuboids loaded: %s", cube_id, len(cuboids))
    return cuboids


def build_spanning_tree(cube_id):
    return ForestSpanningTree(load_cuboids(cube_id))


def save_segment(cube_id, name):
    _get_cube(cube_id)
    segment = CubeSegment(cubeId=cube_id, name=name)
    segment = segment.save()
    return segment.id


def get_segment(cube_id, segment_id):
    segment = db.session.get(CubeSegment, segment_id)
    if segment is None or segment.cubeId != cube_id:
        raise NotFoundError("Segment (ID:{}) does not exist in cube {}!".format(segment_id, cube_id))
    return segment


def record_layout(segment_id, layout_id, rows, byte_size=0):
    """
    Persist a built layout, the row count is the cost used by the spanning tree
    :param segment_id:
    :param layout_id:
    :param rows:
    :param byte_size:
    :return:
    """
    if db.session.get(CubeSegment, segment_id) is None:
        raise NotFoundError("Segment (ID:{}) does not exist!".format(segment_id))
    if db.session.get(CubeLayout, layout_id) is None:
        raise NotFoundError("Layout (ID:{}) does not exist!".format(layout_id))
    SegmentBuildContext(segment_id).record_layout(layout_id, rows, byte_size)
    return True
