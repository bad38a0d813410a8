from celery import Celery, Task
from flask import Flask, jsonify

from config import SQLALCHEMY_DATABASE_URI, CELERY_BROKER, CELERY_BACKEND, CELERY_ALWAYS_EAGER
from utils.error import ServiceError
from utils.orm import db
from cube import view


def celery_init_app(flask_app):
    """
    Celery bound to the flask app, every task runs inside the app context
    :param flask_app:
    :return:
    """

    class FlaskTask(Task):
        def __call__(self, *args, **kwargs):
            with flask_app.app_context():
                return self.run(*args, **kwargs)

    celery = Celery(flask_app.name, task_cls=FlaskTask, broker=CELERY_BROKER, backend=CELERY_BACKEND,
                    include=['engine.tasks'])
    celery.conf.update(task_always_eager=CELERY_ALWAYS_EAGER, task_eager_propagates=CELERY_ALWAYS_EAGER)
    celery.set_default()
    flask_app.extensions['celery'] = celery
    return celery


# Init flask environment
app = Flask(__name__)
app.config['SQLALCHEMY_DATABASE_URI'] = SQLALCHEMY_DATABASE_URI
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

db.init_app(app)
app.register_blueprint(view.bp)

# Init celery environment
celery_app = celery_init_app(app)


@app.cli.command('init_db')
def init_db():
    """
    With {flask init_db} to init the metadata schema
    :return:
    """
    db.create_all()


@app.cli.command('drop_db')
def drop_db():
    """
    With {flask drop_db} to drop the metadata schema
    :return:
    """
    db.drop_all()


@app.errorhandler(ServiceError)
def handle_invalid_usage(error):
    response = jsonify(error.to_dict())
    response.status_code = error.status_code
    return response


if __name__ == '__main__':
    app.run(debug=True)
