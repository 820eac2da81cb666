import os
import logging
from wrapped import create_app
from wrapped.database import db
from wrapped import models
from wrapped.scheduler import start_scheduler, create_scheduler_tables, init_scheduler

CONFIG_NAME = os.environ.get('FLASK_CONFIG') or 'default'

app = create_app(CONFIG_NAME)

logging.basicConfig(
    level=app.config.get('LOG_LEVEL', 'INFO'),
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
)


# ----------------- 数据库初始化（CLI 命令） -----------------
@app.cli.command("init_db")
def init_db_command():
    with app.app_context():
        # 1. 创建应用程序模型表
        db.create_all()
        print('✅ 应用程序模型表创建成功!')

        # 2. 必须先配置调度器，才能创建它的表
        init_scheduler(app)
        create_scheduler_tables(app)

    print('✅ 数据库初始化完成!')


# ---------------------------------------------------------


if __name__ == '__main__':
    # debug 模式下 reloader 会启动两个进程，只在子进程里启动调度器
    if not app.debug or os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
        init_scheduler(app)
        start_scheduler()

    app.run(host='0.0.0.0', port=int(os.environ.get('PORT') or 5000))
