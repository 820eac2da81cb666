from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# 统一约束命名，用户名唯一约束冲突时日志里能直接看出是哪张表
NAMING_CONVENTION = {
    'ix': 'ix_%(column_0_label)s',
    'uq': 'uq_%(table_name)s_%(column_0_name)s',
    'fk': 'fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s',
    'pk': 'pk_%(table_name)s',
}

db = SQLAlchemy(metadata=MetaData(naming_convention=NAMING_CONVENTION))

# ⚠️ 这里只创建 db 实例，连接在 create_app() 里通过 db.init_app(app) 完成。
