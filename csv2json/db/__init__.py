from csv2json.db.models import Base, CSVBatch
from csv2json.db.connection import Database, build_url

__all__ = ['Base', 'CSVBatch', 'Database', 'build_url']
