import datetime
from enum import Enum

from utils.orm import db, CreateUpdateMixin


class CubeStatus(Enum):
    EMPTY = 0
    READY = 1
    RUNNING = 2
    DELETED = 3
    ERROR = 4


class MeasureAction(Enum):
    SUM = 0
    AVG = 1
    COUNT = 2
    CountDistinct = 3
    FIRST = 4
    MAX = 5
    MIN = 6
    MEAN = 7


class SegmentStatus(Enum):
    NEW = 0
    BUILDING = 1
    READY = 2
    ERROR = 3


class Cube(CreateUpdateMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False, comment="cube name")
    status = db.Column(db.Enum(CubeStatus), nullable=False)
    table = db.Column(db.String(255), nullable=False)
    desc = db.Column(db.String(255), nullable=True)
    createdAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)
    updatedAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)
    measure = db.relationship('Measure', backref='cube', lazy=True)
    dimension = db.relationship('Dimension', backref='cube', lazy=True)
    index = db.relationship('CubeIndex', backref='cube', lazy=True)


class Measure(CreateUpdateMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    cubeId = db.Column(db.Integer, db.ForeignKey('cube.id'), nullable=False)
    col = db.Column(db.String(255), nullable=False, comment="measure col name")
    colType = db.Column(db.String(255), nullable=True, comment="measure col type")
    action = db.Column(db.Enum(MeasureAction), nullable=False, comment="group function on measure")
    desc = db.Column(db.String(255), nullable=True)
    createdAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)
    updatedAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)


class Dimension(CreateUpdateMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    cubeId = db.Column(db.Integer, db.ForeignKey('cube.id'), nullable=False)
    table = db.Column(db.String(255), nullable=False, comment="table name")
    col = db.Column(db.String(255), nullable=False, comment="table column name, cube table for foreign table")
    colType = db.Column(db.String(255), nullable=True, comment="dimension column type")
    func = db.Column(db.String(255), nullable=True, comment="function on dimension column")
    desc = db.Column(db.String(255), nullable=True)
    createdAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)
    updatedAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)


class CubeIndex(CreateUpdateMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    cubeId = db.Column(db.Integer, db.ForeignKey('cube.id'), nullable=False)
    dimensions = db.Column(db.JSON, nullable=False, comment="dimension id list of the cuboid")
    measures = db.Column(db.JSON, nullable=False, comment="measure id list of the cuboid")
    createdAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)
    updatedAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)
    layout = db.relationship('CubeLayout', backref='index', lazy=True, order_by='CubeLayout.id')


class CubeLayout(CreateUpdateMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    indexId = db.Column(db.Integer, db.ForeignKey('cube_index.id'), nullable=False)
    colOrder = db.Column(db.JSON, nullable=False, comment="ordered dimension and measure ids")
    shardBy = db.Column(db.JSON, nullable=True, comment="dimension ids to shard the layout")
    createdAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)
    updatedAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)


class CubeSegment(CreateUpdateMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    cubeId = db.Column(db.Integer, db.ForeignKey('cube.id'), nullable=False)
    name = db.Column(db.String(255), nullable=False, comment="segment range, eg 20200101_20200201")
    status = db.Column(db.Enum(SegmentStatus), nullable=False, default=SegmentStatus.NEW)
    createdAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)
    updatedAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)


class SegmentLayout(CreateUpdateMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    segmentId = db.Column(db.Integer, db.ForeignKey('cube_segment.id'), nullable=False)
    layoutId = db.Column(db.Integer, db.ForeignKey('cube_layout.id'), nullable=False)
    rowCount = db.Column(db.BigInteger, nullable=False, comment="row count of the built layout")
    byteSize = db.Column(db.BigInteger, nullable=True)
    createdAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)
    updatedAt = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=True)
