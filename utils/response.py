from flask import jsonify


def json_response(message="success", data=None, code=200):
    resp = jsonify({"code": code, "message": message, "data": data})
    resp.status_code = code
    return resp


def report_response(report):
    """同步报告响应；有跳过或出错的记录时在 message 中注明"""
    failed = report.totals["skipped_or_errored"]
    message = "同步完成" if not failed else f"同步完成，{failed} 条记录跳过或出错"
    return json_response(message=message, data=report.to_dict())
