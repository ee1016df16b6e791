from flask import Blueprint, current_app, request

from constants.sync import EntityType
from extensions.file_store import open_stores
from services.match_service import MatchResolver
from services.relation_service import RelationService
from services.sync_service import SyncOrchestrator
from utils.exceptions import BizError, FatalStoreError
from utils.response import json_response, report_response


sync_bp = Blueprint("sync", __name__, url_prefix="/api/sync")

# 关联变化后需要重写的文件快照
_RELATION_SNAPSHOTS = [EntityType.RELATIONS.value, EntityType.CASES.value]


@sync_bp.errorhandler(BizError)
def _biz_error(e: BizError):
    return json_response(code=e.code, message=e.message, data=e.data), e.code


@sync_bp.errorhandler(FatalStoreError)
def _fatal_error(e: FatalStoreError):
    return json_response(code=503, message=e.message), 503


def _stores():
    """每个请求只打开一次存储句柄，请求处理结束即释放"""
    return open_stores(current_app._get_current_object())


def _relation_args():
    data = request.get_json(silent=True) or {}
    test_case_id = data.get("test_case_id") or request.args.get("test_case_id")
    incident_id = data.get("incident_id") or request.args.get("incident_id")
    if not test_case_id or not incident_id:
        raise BizError("test_case_id 和 incident_id 不能为空", 400)
    return str(test_case_id).strip(), str(incident_id).strip()


@sync_bp.post("/run")
def run_sync():
    data = request.get_json(silent=True) or {}
    entities = data.get("entities")
    if entities is not None and not isinstance(entities, list):
        return json_response(code=400, message="entities 必须为数组")
    try:
        with _stores() as handle:
            report = SyncOrchestrator(handle, current_app.config).run(entities)
    except ValueError as e:
        return json_response(code=400, message=str(e))
    return report_response(report)


@sync_bp.get("/match")
def preview_matches():
    resolver = MatchResolver.from_config(current_app.config)
    items = RelationService.preview_matches(resolver, ticket=request.args.get("ticket"))
    return json_response(data={"items": items, "total": len(items), "rules": resolver.rule_names})


@sync_bp.get("/test-cases/<test_case_id>/duplicates")
def possible_duplicates(test_case_id):
    threshold = request.args.get(
        "threshold", default=current_app.config["DUPLICATE_SIMILARITY_THRESHOLD"], type=float
    )
    items = RelationService.duplicates_for_test_case(test_case_id, threshold)
    return json_response(data={"items": items, "threshold": threshold})


@sync_bp.post("/relations")
def link_relation():
    test_case_id, incident_id = _relation_args()
    with _stores() as handle:
        result = RelationService.link(test_case_id, incident_id)
        SyncOrchestrator(handle, current_app.config).refresh_snapshots(_RELATION_SNAPSHOTS)
    return json_response(message="关联成功", data=result)


@sync_bp.delete("/relations")
def unlink_relation():
    test_case_id, incident_id = _relation_args()
    resolver = MatchResolver.from_config(current_app.config)
    with _stores() as handle:
        result = RelationService.unlink(test_case_id, incident_id, resolver=resolver)
        SyncOrchestrator(handle, current_app.config, resolver=resolver).refresh_snapshots(_RELATION_SNAPSHOTS)
    return json_response(message="已删除关联", data=result)
