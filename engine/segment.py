from cube.model import SegmentLayout
from utils.orm import db
from utils.logger import logger as LOG


class DataLayout:
    def __init__(self, layout_id, rows, byte_size=0):
        """
        A layout that has been built in one segment
        :param layout_id:
        :param rows: row count, used as the build cost of its children
        :param byte_size:
        """
        self.layout_id = layout_id
        self.rows = rows
        self.byte_size = byte_size

    def __repr__(self):
        return 'DataLayout(layout={}, rows={})'.format(self.layout_id, self.rows)


class BuildContext:
    """
    Build state of one segment, read by the spanning tree and never written by it
    """

    def get_layout(self, layout_id):
        """
        :param layout_id:
        :return: DataLayout, None if the layout is not built
        """
        raise NotImplementedError

    def record_layout(self, layout_id, rows, byte_size=0):
        raise NotImplementedError

    def is_built(self, layout_id):
        return self.get_layout(layout_id) is not None

    def get_rows(self, layout_id):
        data_layout = self.get_layout(layout_id)
        if data_layout is None:
            return None
        return data_layout.rows


class DataSegment(BuildContext):
    def __init__(self, segment_id=None, layouts=None):
        """
        In memory build state
        :param segment_id:
        :param layouts: layout id -> row count
        """
        self.segment_id = segment_id
        self._layouts = {}
        for layout_id, rows in (layouts or {}).items():
            self.record_layout(layout_id, rows)

    def get_layout(self, layout_id):
        return self._layouts.get(layout_id)

    def record_layout(self, layout_id, rows, byte_size=0):
        data_layout = DataLayout(layout_id, rows, byte_size)
        self._layouts[layout_id] = data_layout
        return data_layout

    def get_layouts(self):
        return list(self._layouts.values())


class SegmentBuildContext(BuildContext):
    def __init__(self, segment_id):
        """
        Build state persisted in the meta db, every call reads the latest row
        :param segment_id:
        """
        self.segment_id = segment_id

    def get_layout(self, layout_id):
        row = SegmentLayout.query.filter_by(segmentId=self.segment_id, layoutId=layout_id).first()
        if row is None:
            return None
        return DataLayout(row.layoutId, row.rowCount, row.byteSize or 0)

    def record_layout(self, layout_id, rows, byte_size=0):
        row = SegmentLayout.query.filter_by(segmentId=self.segment_id, layoutId=layout_id).first()
        if row is None:
            row = SegmentLayout(segmentId=self.segment_id, layoutId=layout_id, rowCount=rows, byteSize=byte_size)
            row.save()
        else:
            row.update(dict(rowCount=rows, byteSize=byte_size))
            db.session.commit()
        LOG.info("SegmentId: %s, Layout %s built, rows: %s", self.segment_id, layout_id, rows)
        return DataLayout(layout_id, rows, byte_size)
