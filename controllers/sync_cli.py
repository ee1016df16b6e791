"""``flask sync`` 命令组：在命令行执行同步与建表"""
import click
from flask import current_app
from flask.cli import AppGroup

from extensions.database import db
from extensions.file_store import open_stores
from services.sync_service import SyncOrchestrator
from utils.exceptions import FatalStoreError

sync_cli = AppGroup("sync", help="文件存储与数据库之间的双向同步")


@sync_cli.command("run")
@click.argument("entities", nargs=-1)
@click.option("--report/--no-report", default=None, help="是否写出 JSON 报告，默认读取 SYNC_WRITE_REPORT")
def run_command(entities, report):
    """同步全部实体，或只同步指定的实体（teams cells analysts plans cases defects projects relations）"""
    if report is not None:
        current_app.config["SYNC_WRITE_REPORT"] = report
    try:
        with open_stores(current_app._get_current_object()) as handle:
            result = SyncOrchestrator(handle, current_app.config).run(list(entities) or None)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="ENTITIES")
    except FatalStoreError as e:
        click.echo(f"同步中止: {e.message}", err=True)
        raise SystemExit(1)
    click.echo(f"同步运行 {result.run_id} 完成，合计 {result.totals}")


@sync_cli.command("init-db")
def init_db_command():
    """按模型创建缺失的数据表（已存在的表不受影响）"""
    db.create_all()
    click.echo("数据表已就绪")
