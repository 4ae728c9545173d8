from databases import Database

from livebracket.config import config

database = Database(str(config.pg_dsn))
