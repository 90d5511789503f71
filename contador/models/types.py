# contador/models/types.py
from sqlalchemy import BigInteger, Integer

# BIGINT en MySQL/PostgreSQL; SQLite solo autoincrementa INTEGER PRIMARY KEY
PK = BigInteger().with_variant(Integer, "sqlite")
