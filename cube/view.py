from flask import Blueprint, request, jsonify

from cube import service
from engine import tasks

bp = Blueprint('cube', __name__, url_prefix='/cube')


@bp.route('/list', methods=['GET', 'POST'])
def cube_list():
    """
    REF: {page, size, show_del}
    :return:
    """
    if request.method == "GET":
        page_num = 0
        page_size = 15
        show_del = False
    else:
        page_num = request.json['page']
        page_size = request.json['size']
        show_del = request.json['show_del']
    return jsonify(service.list_cube(page_num, page_size, show_del))


@bp.route('/del', methods=['POST'])
def cube_del():
    """
    REF: {id}
    :return:
    """
    return jsonify(service.del_cube(request.json['id']))


@bp.route('/save', methods=['POST'])
def cube_add():
    """
    REF: {name, table, desc}
    :return:
    """
    cube_id = service.save_cube(name=request.json['name'], table=request.json['table'], desc=request.json.get('desc'))
    return jsonify(dict(cubeId=cube_id))


@bp.route('/dimension/save', methods=['POST'])
def dimension_add():
    """
    REF: {id, data: [{table, col, colType, func, desc}]}
    :return:
    """
    return jsonify(dict(dimensionIds=service.save_dimension(request.json['id'], request.json['data'])))


@bp.route('/measure/save', methods=['POST'])
def measure_add():
    """
    REF: {id, data: [{col, action, colType, desc}]}
    :return:
    """
    return jsonify(dict(measureIds=service.save_measure(request.json['id'], request.json['data'])))


@bp.route('/index/save', methods=['POST'])
def index_add():
    """
    REF: {id, data: [{dimensions, measures, layouts}]}
    :return:
    """
    return jsonify(dict(indexIds=service.save_index(request.json['id'], request.json['data'])))


@bp.route('/index/init', methods=['POST'])
def index_init():
    """
    REF: {id, min_dimensions}
    :return:
    """
    index_ids = service.init_index_plan(request.json['id'], request.json.get('min_dimensions', 1))
    return jsonify(dict(indexIds=index_ids))


@bp.route('/tree', methods=['POST'])
def spanning_tree():
    """
    REF: {id}, static forest of the cube, no build state
    :return:
    """
    return jsonify(service.build_spanning_tree(request.json['id']).to_dict())


@bp.route('/segment/save', methods=['POST'])
def segment_add():
    """
    REF: {id, name}
    :return:
    """
    return jsonify(dict(segmentId=service.save_segment(request.json['id'], request.json['name'])))


@bp.route('/segment/layout/save', methods=['POST'])
def segment_layout_add():
    """
    REF: {segmentId, layoutId, rows, byteSize}
    :return:
    """
    return jsonify(service.record_layout(request.json['segmentId'], request.json['layoutId'], request.json['rows'],
                                         request.json.get('byteSize', 0)))


@bp.route('/segment/plan', methods=['POST'])
def segment_plan():
    """
    REF: {id, segmentId}
    :return:
    """
    result = tasks.plan_segment.delay(request.json['id'], request.json['segmentId'])
    response = dict(taskId=result.id)
    if result.ready():
        response['result'] = result.get()
    return jsonify(response)


@bp.route('/segment/plan/result', methods=['POST'])
def segment_plan_result():
    """
    REF: {taskId}, state of a plan started by /segment/plan
    :return:
    """
    result = tasks.plan_segment.AsyncResult(request.json['taskId'])
    response = dict(taskId=result.id, state=result.state)
    if result.ready():
        if result.successful():
            response['result'] = result.get()
        else:
            response['error'] = str(result.result)
    return jsonify(response)
