from datetime import datetime
from decimal import Decimal
from enum import Enum

from flask_sqlalchemy import SQLAlchemy

# hold the db connection instance
db = SQLAlchemy()


# To serialize SQLalchemy objects
def row_to_dict(obj):
    if not hasattr(obj, '__table__'):
        return None
    model_fields = {}
    for column in obj.__table__.columns:
        data = getattr(obj, column.key)
        if isinstance(data, datetime):
            model_fields[column.key] = data.strftime("%Y-%m-%d %H:%M:%S")
        elif isinstance(data, Enum):
            model_fields[column.key] = str(data.name)
        elif isinstance(data, Decimal):
            model_fields[column.key] = float(data)
        else:
            model_fields[column.key] = data
    return model_fields


class CreateUpdateMixin(object):
    def save(self):
        """
        add createdAt and updatedAt to the row by default
        :return:
        """
        self.createdAt = datetime.now()
        self.updatedAt = datetime.now()
        db.session.add(self)
        db.session.commit()
        return self

    def update(self, values):
        """
        change updatedAt by default
        :param values:
        :return:
        """
        for attr in self.__mapper__.columns.keys():
            if attr in values:
                setattr(self, attr, values[attr])
        self.updatedAt = datetime.now()
        return self
