from celery import shared_task

from cube import service
from engine.cube_execute import CubeBuildJob
from engine.segment import SegmentBuildContext
from utils.logger import logger as LOG


@shared_task(ignore_result=False)
def plan_segment(cube_id, segment_id):
    """
    Rebuild the spanning forest of the cube and replay the decisions of the segment from its build state
    :param cube_id:
    :param segment_id:
    :return: the decided tree and the cuboids that can be built next
    """
    service.get_segment(cube_id, segment_id)
    job = CubeBuildJob(cube_id, service.load_cuboids(cube_id), SegmentBuildContext(segment_id))
    spanning_tree = job.resume()
    next_ids = [entity.id for entity in job.next_index_entities()]
    LOG.info("CubeId: %s, SegmentId: %s, Next cuboids: %s", cube_id, segment_id, next_ids)
    return dict(cubeId=cube_id, segmentId=segment_id, tree=spanning_tree.to_dict(), next=next_ids)
