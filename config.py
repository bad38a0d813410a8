import os

# metadata database, TiDB / MySQL in production
SQLALCHEMY_DATABASE_URI = os.environ.get('CUBE_FOREST_DATABASE_URI', 'mysql+pymysql://root@127.0.0.1:4000/TiCube')

# celery broker and result store
CELERY_BROKER = os.environ.get('CUBE_FOREST_CELERY_BROKER', 'redis://127.0.0.1:6379/0')
CELERY_BACKEND = os.environ.get('CUBE_FOREST_CELERY_BACKEND', CELERY_BROKER)
CELERY_ALWAYS_EAGER = os.environ.get('CUBE_FOREST_CELERY_EAGER', '0') == '1'

# log
LOG_LEVEL = os.environ.get('CUBE_FOREST_LOG_LEVEL', 'DEBUG')
LOG_FILE = os.environ.get('CUBE_FOREST_LOG_FILE')
